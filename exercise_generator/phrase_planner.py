"""Phrase-coherent generation for Exercise Generator.

This module builds the "musical" exercises: both staves share one rhythm per
measure, the treble walks mostly by step and the bass outlines the harmony
with roots, fifths and the occasional third. Measures are built one at a
time, each in two steps:

``choose_rhythm``
    Picks one hand-curated rhythm for the measure from :data:`PHRASE_RHYTHMS`.
    Every pattern is a list of beat values; the same list drives both voices,
    so slot ``i`` lasts equally long in the treble and the bass.

:class:`PhraseGenerator`
    Fills each slot of that rhythm with a melody note from
    :class:`~exercise_generator.voice_leading.MelodyWalker` and a bass note
    from :class:`~exercise_generator.harmony_generator.HarmonyGenerator`. The
    last slot of a measure may turn into a rest in either voice to mark the
    end of a phrase; the rest keeps the slot's duration so alignment holds.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .durations import DurationKind
from .harmony_generator import HarmonyGenerator
from .models import Event, GenerationConfig, Measure, Voice
from .scales import scale_for, window_for
from .utils import RandomSource, chance, ensure_rng, random_index
from .voice_leading import MelodyWalker

__all__ = [
    "PHRASE_RHYTHMS",
    "MELODY_REST_PROBABILITY",
    "BASS_REST_PROBABILITY",
    "rhythms_for",
    "choose_rhythm",
    "PhraseGenerator",
]

# Rhythm patterns keyed by beats per measure. Values are beat lengths of each
# slot and must sum to the key.
PHRASE_RHYTHMS: Dict[int, Tuple[Tuple[int, ...], ...]] = {
    4: ((1, 1, 1, 1), (2, 1, 1), (1, 2, 1), (2, 2), (4,)),
    3: ((1, 1, 1), (2, 1), (1, 2)),
    2: ((1, 1), (2,)),
}

MELODY_REST_PROBABILITY = 0.15
BASS_REST_PROBABILITY = 0.10


def rhythms_for(beats: int) -> Tuple[Tuple[int, ...], ...]:
    """Return the candidate patterns for ``beats`` beats per measure.

    Meters without curated patterns fall back to straight quarter notes.
    """

    return PHRASE_RHYTHMS.get(beats, ((1,) * beats,))


def choose_rhythm(beats: int, rng: Optional[RandomSource] = None) -> Tuple[int, ...]:
    """Pick one rhythm pattern for a measure uniformly at random."""

    patterns = rhythms_for(beats)
    return patterns[random_index(ensure_rng(rng), len(patterns))]


class PhraseGenerator:
    """Generate rhythmically aligned melody and bass measures."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self.rng = ensure_rng(rng)

    def generate(
        self, beats: int, num_measures: int, config: GenerationConfig
    ) -> List[Measure]:
        """Return ``num_measures`` aligned measures of ``beats`` beats.

        The melody walk continues across bar lines so the whole exercise
        reads as one phrase. Each measure independently decides whether the
        bass uses the third. Draws happen measure by measure: the rhythm,
        then the treble slots, then the bass.
        """

        melody = MelodyWalker(
            window_for(Voice.TREBLE, config.treble), config.treble.center, self.rng
        )
        harmony = HarmonyGenerator(
            window_for(Voice.BASS, config.bass),
            config.bass.center,
            scale_for(Voice.BASS).pitches,
            self.rng,
        )
        return [
            self._measure(choose_rhythm(beats, self.rng), melody, harmony)
            for _ in range(num_measures)
        ]

    def _measure(
        self,
        rhythm: Tuple[int, ...],
        melody: MelodyWalker,
        harmony: HarmonyGenerator,
    ) -> Measure:
        last = len(rhythm) - 1

        treble: List[Event] = []
        for slot, beats in enumerate(rhythm):
            if slot == last and chance(self.rng, MELODY_REST_PROBABILITY):
                treble.append(Event.rest(DurationKind.rest_for(beats), Voice.TREBLE))
            else:
                treble.append(
                    Event.note(DurationKind.note_for(beats), Voice.TREBLE, melody.next_pitch())
                )

        use_third = harmony.choose_variant()
        bass: List[Event] = []
        for slot, beats in enumerate(rhythm):
            if slot == last and chance(self.rng, BASS_REST_PROBABILITY):
                bass.append(Event.rest(DurationKind.rest_for(beats), Voice.BASS))
            else:
                bass.append(
                    Event.note(
                        DurationKind.note_for(beats),
                        Voice.BASS,
                        harmony.pitch_for_slot(slot, use_third),
                    )
                )

        return Measure(treble=tuple(treble), bass=tuple(bass))
