"""Value objects shared by the generators, the CLI and the web interface.

Everything here is immutable. Generators create :class:`Event` and
:class:`Measure` instances once and hand them to a rendering sink, while
:class:`GenerationConfig` is the read-only snapshot of the user's choices that
is threaded through every generation call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .durations import DurationKind

__all__ = [
    "Voice",
    "GenerationMode",
    "Event",
    "Measure",
    "VoiceRange",
    "GenerationConfig",
]


class Voice(Enum):
    """Staff a line of music is written on."""

    TREBLE = "treble"
    BASS = "bass"


class GenerationMode(Enum):
    """How the two voices of a measure relate to each other."""

    SHARED_PATTERN = "shared"
    FULLY_INDEPENDENT = "independent"
    PHRASE = "phrase"


@dataclass(frozen=True)
class Event:
    """A single note or rest placed in one voice of a measure."""

    kind: DurationKind
    is_rest: bool
    beats: int
    voice: Voice
    pitch: Optional[str] = None

    def __post_init__(self) -> None:
        if self.beats != self.kind.beats:
            raise ValueError(
                f"{self.kind.name} lasts {self.kind.beats} beats, not {self.beats}"
            )
        if self.is_rest != self.kind.is_rest:
            raise ValueError(f"{self.kind.name} rest flag mismatch")
        if self.is_rest and self.pitch is not None:
            raise ValueError("rests cannot carry a pitch")
        if not self.is_rest and self.pitch is None:
            raise ValueError("notes require a pitch")

    @classmethod
    def note(cls, kind: DurationKind, voice: Voice, pitch: str) -> "Event":
        return cls(kind, False, kind.beats, voice, pitch)

    @classmethod
    def rest(cls, kind: DurationKind, voice: Voice) -> "Event":
        return cls(kind, True, kind.beats, voice, None)


@dataclass(frozen=True)
class Measure:
    """One bar of the exercise holding the treble and bass lines."""

    treble: Tuple[Event, ...] = ()
    bass: Tuple[Event, ...] = ()

    def events(self, voice: Voice) -> Tuple[Event, ...]:
        return self.treble if voice is Voice.TREBLE else self.bass

    def beats(self, voice: Voice) -> int:
        """Return the total duration of ``voice`` in beats."""

        return sum(event.beats for event in self.events(voice))

    def is_aligned(self) -> bool:
        """Return ``True`` when both voices share the same per-slot durations."""

        if len(self.treble) != len(self.bass):
            return False
        return all(t.beats == b.beats for t, b in zip(self.treble, self.bass))


@dataclass(frozen=True)
class VoiceRange:
    """Center pitch and how many scale steps a voice may move around it."""

    center: str
    above: int
    below: int


@dataclass(frozen=True)
class GenerationConfig:
    """Immutable snapshot of the user's generation choices.

    ``phrase_mode`` takes precedence over ``fully_random`` when both are set.
    The visibility flags do not affect generation; they are forwarded to the
    rendering sink.
    """

    beats_per_measure: int = 4
    beat_unit: int = 4
    num_measures: int = 4
    treble: VoiceRange = field(default_factory=lambda: VoiceRange("c/4", 2, 1))
    bass: VoiceRange = field(default_factory=lambda: VoiceRange("c/3", 1, 0))
    phrase_mode: bool = False
    fully_random: bool = False
    show_treble: bool = True
    show_bass: bool = True

    @property
    def mode(self) -> GenerationMode:
        if self.phrase_mode:
            return GenerationMode.PHRASE
        if self.fully_random:
            return GenerationMode.FULLY_INDEPENDENT
        return GenerationMode.SHARED_PATTERN

    @property
    def time_signature(self) -> str:
        return f"{self.beats_per_measure}/{self.beat_unit}"

    def voice_range(self, voice: Voice) -> VoiceRange:
        return self.treble if voice is Voice.TREBLE else self.bass
