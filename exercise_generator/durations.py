"""Catalog of the note and rest durations used in generated exercises.

Every event emitted by the generators is tagged with a :class:`DurationKind`.
The enum is closed so an unknown duration code can never slip into a measure
and every kind carries its beat value and note/rest classification.

Example
-------
>>> DurationKind.HALF.beats
2
>>> DurationKind.rest_for(1)
<DurationKind.QUARTER_REST: 'qr'>
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

__all__ = ["DurationKind", "NOTE_KINDS", "REST_KINDS", "SMALLEST_REST"]


class DurationKind(Enum):
    """Note or rest duration measured in quarter-note beats.

    The member value is the short code understood by notation renderers
    (``"q"`` for a quarter note, ``"hr"`` for a half rest and so on).
    """

    WHOLE = "w"
    HALF = "h"
    QUARTER = "q"
    WHOLE_REST = "wr"
    HALF_REST = "hr"
    QUARTER_REST = "qr"

    @property
    def code(self) -> str:
        return self.value

    @property
    def beats(self) -> int:
        return _BEATS[self]

    @property
    def is_rest(self) -> bool:
        return self.value.endswith("r")

    @classmethod
    def note_for(cls, beats: int) -> "DurationKind":
        """Return the note kind lasting ``beats``.

        Raises
        ------
        ValueError
            If no note in the catalog has that length.
        """

        for kind in NOTE_KINDS:
            if kind.beats == beats:
                return kind
        raise ValueError(f"No note duration lasts {beats} beats")

    @classmethod
    def rest_for(cls, beats: int) -> "DurationKind":
        """Return the rest kind lasting ``beats``."""

        for kind in REST_KINDS:
            if kind.beats == beats:
                return kind
        raise ValueError(f"No rest duration lasts {beats} beats")


_BEATS = {
    DurationKind.WHOLE: 4,
    DurationKind.HALF: 2,
    DurationKind.QUARTER: 1,
    DurationKind.WHOLE_REST: 4,
    DurationKind.HALF_REST: 2,
    DurationKind.QUARTER_REST: 1,
}

# Catalog order matters: partitioning picks among the filtered candidates by
# index, so reordering these tuples changes seeded output.
NOTE_KINDS: Tuple[DurationKind, ...] = (
    DurationKind.WHOLE,
    DurationKind.HALF,
    DurationKind.QUARTER,
)
REST_KINDS: Tuple[DurationKind, ...] = (
    DurationKind.WHOLE_REST,
    DurationKind.HALF_REST,
    DurationKind.QUARTER_REST,
)

# Used when a remaining budget cannot be filled by any catalog entry.
SMALLEST_REST = min(REST_KINDS, key=lambda kind: kind.beats)
