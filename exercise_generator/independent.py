"""Measures whose pitches are drawn independently at random.

Two flavours are offered. In the default *shared pattern* mode one rhythm is
partitioned per measure and both staves read it, so the hands move together
while their pitches are unrelated. In *fully independent* mode each staff gets
its own rhythm and the two lines need not line up at all.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from .durations import DurationKind
from .models import Event, GenerationConfig, Measure, Voice
from .rhythm_engine import RhythmPartitioner
from .scales import window_for
from .utils import RandomSource, ensure_rng, random_index

__all__ = ["IndependentMeasureGenerator"]


class IndependentMeasureGenerator:
    """Generate measures with uniformly random pitches."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self.rng = ensure_rng(rng)
        self.partitioner = RhythmPartitioner(self.rng)

    def random_pitch(self, window: Sequence[str]) -> str:
        return window[random_index(self.rng, len(window))]

    def _voice_events(
        self, rhythm: Sequence[DurationKind], voice: Voice, window: Sequence[str]
    ) -> Tuple[Event, ...]:
        return tuple(
            Event.rest(kind, voice)
            if kind.is_rest
            else Event.note(kind, voice, self.random_pitch(window))
            for kind in rhythm
        )

    def generate(
        self,
        beats: int,
        num_measures: int,
        config: GenerationConfig,
        *,
        fully_independent: bool = False,
    ) -> List[Measure]:
        """Return ``num_measures`` measures of ``beats`` beats each.

        Parameters
        ----------
        beats:
            Beat budget every voice of every measure must fill.
        num_measures:
            Number of measures to produce.
        config:
            Source of the per-voice pitch windows.
        fully_independent:
            When ``True`` the treble and bass rhythms are partitioned
            separately instead of sharing one pattern.
        """

        treble_window = window_for(Voice.TREBLE, config.treble)
        bass_window = window_for(Voice.BASS, config.bass)

        measures: List[Measure] = []
        for _ in range(num_measures):
            treble_rhythm = self.partitioner.partition(beats)
            bass_rhythm = (
                self.partitioner.partition(beats) if fully_independent else treble_rhythm
            )
            measures.append(
                Measure(
                    treble=self._voice_events(treble_rhythm, Voice.TREBLE, treble_window),
                    bass=self._voice_events(bass_rhythm, Voice.BASS, bass_window),
                )
            )
        return measures
