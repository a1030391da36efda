"""Stepwise melodic motion for the treble line of phrase exercises.

The melody is a weighted random walk over positions in the treble pitch
window. Repeated notes and single steps dominate; skips of two positions are
rare and nothing larger is ever produced, so consecutive notes are always
close enough to read comfortably.

Example
-------
>>> walker = MelodyWalker(("c/4", "d/4", "e/4"), "d/4", random.Random(7))
>>> walker.current
'd/4'
>>> walker.next_pitch() in walker.window
True

Design Notes
------------
- Steps are taken in window-index space rather than semitones so the line
  always stays on the natural scale of the window.
- A step leaving the window is clamped to the nearest edge instead of being
  reflected, which makes repeated edge notes slightly more likely.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .note_utils import nearest_pitch_index, pitch_to_midi
from .utils import RandomSource, ensure_rng, weighted_choice

__all__ = ["STEP_OFFSETS", "STEP_WEIGHTS", "clamp_index", "next_step_index", "MelodyWalker"]

STEP_OFFSETS: Tuple[int, ...] = (-2, -1, 0, 1, 2)
STEP_WEIGHTS: Tuple[float, ...] = (0.05, 0.35, 0.20, 0.35, 0.05)


def clamp_index(index: int, length: int) -> int:
    """Clamp ``index`` into ``[0, length - 1]``."""

    return max(0, min(length - 1, index))


def next_step_index(prev_index: int, length: int, draw: float) -> int:
    """Return the window position following ``prev_index``.

    ``draw`` is a uniform value in ``[0, 1)`` selecting the offset from
    :data:`STEP_OFFSETS` through :func:`weighted_choice`.
    """

    offset = weighted_choice(STEP_OFFSETS, STEP_WEIGHTS, draw)
    return clamp_index(prev_index + offset, length)


class MelodyWalker:
    """Stateful walk producing one melody pitch per call."""

    def __init__(
        self,
        window: Sequence[str],
        center: str,
        rng: Optional[RandomSource] = None,
    ) -> None:
        """Start the walk at the window pitch nearest to ``center``.

        Raises
        ------
        ValueError
            If ``window`` is empty.
        """

        if not window:
            raise ValueError("window must not be empty")
        self.window = tuple(window)
        self.rng = ensure_rng(rng)
        self.index = nearest_pitch_index(self.window, pitch_to_midi(center))

    @property
    def current(self) -> str:
        return self.window[self.index]

    def next_pitch(self) -> str:
        self.index = next_step_index(self.index, len(self.window), self.rng.random())
        return self.window[self.index]
