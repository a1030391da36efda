"""Independent rhythm generation module.

This file exposes a small :class:`RhythmPartitioner` class that fills a beat
budget with note and rest durations drawn from the
:mod:`~exercise_generator.durations` catalog. Measure generators use it to lay
down the rhythm of a bar before pitches are assigned, mirroring a typical
composing workflow where the groove is established first and notes are
layered on afterwards.

Each step favours notes over rests nine to one and then picks uniformly among
the durations that still fit. ``partition_beats`` simply proxies to a
partitioner for convenience.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .durations import NOTE_KINDS, REST_KINDS, SMALLEST_REST, DurationKind
from .utils import RandomSource, ensure_rng, random_index

__all__ = ["NOTE_PROBABILITY", "RhythmPartitioner", "partition_beats"]

logger = logging.getLogger(__name__)

# Probability that a step places a note rather than a rest.
NOTE_PROBABILITY = 0.9


class RhythmPartitioner:
    """Split a beat budget into a left-to-right sequence of durations."""

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        """Create a partitioner drawing from ``rng``.

        Parameters
        ----------
        rng:
            Source of uniform draws. When ``None`` a fresh unseeded
            :class:`random.Random` is used.
        """

        self.rng = ensure_rng(rng)

    def partition(self, beats: float) -> List[DurationKind]:
        """Return durations whose beat values sum to ``beats``.

        A non-positive budget yields an empty list. If the remaining budget
        ever drops below every catalog entry (only possible for fractional
        budgets) a quarter rest is emitted anyway and the budget goes
        negative, which ends the measure.
        """

        remaining = beats
        kinds: List[DurationKind] = []
        while remaining > 0:
            is_note = self.rng.random() < NOTE_PROBABILITY and remaining >= 1
            pool = NOTE_KINDS if is_note else REST_KINDS
            candidates = [kind for kind in pool if kind.beats <= remaining]

            if not candidates:
                # TODO: confirm whether overfilling the bar here is intended
                # before replacing it with an error or a shorter duration.
                logger.warning(
                    "No duration fits %s remaining beats; forcing a %s",
                    remaining,
                    SMALLEST_REST.name.lower(),
                )
                kinds.append(SMALLEST_REST)
                remaining -= SMALLEST_REST.beats
                continue

            kind = candidates[random_index(self.rng, len(candidates))]
            kinds.append(kind)
            remaining -= kind.beats
        return kinds


def partition_beats(beats: float, rng: Optional[RandomSource] = None) -> List[DurationKind]:
    """Return a random rhythm filling ``beats``."""

    return RhythmPartitioner(rng).partition(beats)
