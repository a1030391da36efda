"""Pitch tables for each staff and the windows carved out of them.

Each voice owns a fixed, ascending :class:`ScaleTable` of natural pitches
spanning a comfortable reading range for its clef. A *pitch window* is the
contiguous slice of that table the user allows around a chosen center pitch;
every pitch the generators emit for a voice comes from its window.

Example
-------
>>> resolve_pitch_window(Voice.TREBLE, "c/4", above=2, below=1)
('b/3', 'c/4', 'd/4', 'e/4')
"""

from __future__ import annotations

import logging
from typing import Iterator, Sequence, Tuple

from .models import Voice, VoiceRange

__all__ = [
    "ScaleTable",
    "TREBLE_SCALE",
    "BASS_SCALE",
    "scale_for",
    "resolve_pitch_window",
    "window_for",
]

logger = logging.getLogger(__name__)


class ScaleTable:
    """Ordered, ascending sequence of pitch tokens for one staff."""

    def __init__(self, pitches: Sequence[str]) -> None:
        self._pitches: Tuple[str, ...] = tuple(pitches)
        self._index = {pitch: i for i, pitch in enumerate(self._pitches)}

    def index_of(self, pitch: str) -> int:
        """Return the position of ``pitch`` or ``-1`` when it is not listed."""

        return self._index.get(pitch, -1)

    def at(self, index: int) -> str:
        return self._pitches[index]

    def slice(self, start: int, end: int) -> Tuple[str, ...]:
        return self._pitches[start:end]

    @property
    def pitches(self) -> Tuple[str, ...]:
        return self._pitches

    def __len__(self) -> int:
        return len(self._pitches)

    def __iter__(self) -> Iterator[str]:
        return iter(self._pitches)

    def __contains__(self, pitch: object) -> bool:
        return pitch in self._index


TREBLE_SCALE = ScaleTable(
    [
        "a/3", "b/3", "c/4", "d/4", "e/4", "f/4", "g/4", "a/4", "b/4",
        "c/5", "d/5", "e/5", "f/5", "g/5", "a/5", "b/5", "c/6",
    ]
)

BASS_SCALE = ScaleTable(
    [
        "e/2", "f/2", "g/2", "a/2", "b/2",
        "c/3", "d/3", "e/3", "f/3", "g/3", "a/3", "b/3",
        "c/4", "d/4", "e/4",
    ]
)

_SCALES = {Voice.TREBLE: TREBLE_SCALE, Voice.BASS: BASS_SCALE}


def scale_for(voice: Voice) -> ScaleTable:
    """Return the full pitch table for ``voice``."""

    return _SCALES[voice]


def resolve_pitch_window(
    voice: Voice, center: str, above: int, below: int
) -> Tuple[str, ...]:
    """Return the allowed pitches for ``voice`` around ``center``.

    The window spans ``below`` table steps under the center and ``above``
    steps over it, truncated at either end of the table. A center missing from
    the table is not an error: the full table is returned instead. A found
    center always yields at least one pitch.
    """

    table = scale_for(voice)
    idx = table.index_of(center)
    if idx == -1:
        logger.debug(
            "Center %r not in %s scale; using the full table", center, voice.value
        )
        return table.pitches
    start = max(0, idx - below)
    end = min(len(table), idx + above + 1)
    return table.slice(start, end)


def window_for(voice: Voice, voice_range: VoiceRange) -> Tuple[str, ...]:
    """Shortcut for :func:`resolve_pitch_window` using a :class:`VoiceRange`."""

    return resolve_pitch_window(
        voice, voice_range.center, voice_range.above, voice_range.below
    )
