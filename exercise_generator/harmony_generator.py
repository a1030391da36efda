"""Root, fifth and third bass support for phrase exercises.

The bass line outlines a single tonic harmony under the melody: the
configured bass center acts as the root, even rhythm slots play the root and
odd slots the fifth above it. Some measures swap every third slot (indices
2, 6, ...) for the major third to add colour. Targets are expressed in MIDI
numbers and snapped onto the nearest pitch of the bass window, so a narrow
window may pull a target a long way from its intended interval.

Example
-------
>>> bass_target_midi(48, slot=1, use_third=False)
55
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from .note_utils import nearest_pitch_index, pitch_to_midi
from .utils import RandomSource, chance, ensure_rng, random_index

__all__ = [
    "FIFTH",
    "MAJOR_THIRD",
    "THIRD_PROBABILITY",
    "bass_target_midi",
    "snap_to_window",
    "HarmonyGenerator",
]

logger = logging.getLogger(__name__)

FIFTH = 7
MAJOR_THIRD = 4

# Chance that a measure uses the root/fifth/third variant.
THIRD_PROBABILITY = 0.25


def bass_target_midi(root_midi: int, slot: int, use_third: bool) -> int:
    """Return the MIDI target for rhythm ``slot`` above ``root_midi``."""

    if use_third and slot % 4 == 2:
        return root_midi + MAJOR_THIRD
    if slot % 2 == 0:
        return root_midi
    return root_midi + FIFTH


def snap_to_window(window: Sequence[str], target_midi: int) -> Optional[str]:
    """Return the pitch in ``window`` nearest to ``target_midi``.

    ``None`` is returned when ``window`` is empty.
    """

    idx = nearest_pitch_index(window, target_midi)
    return window[idx] if idx >= 0 else None


class HarmonyGenerator:
    """Choose bass pitches slot by slot for one phrase."""

    def __init__(
        self,
        window: Sequence[str],
        root: str,
        fallback_scale: Sequence[str],
        rng: Optional[RandomSource] = None,
    ) -> None:
        """Prepare a generator for ``window`` rooted on ``root``.

        Parameters
        ----------
        window:
            Allowed bass pitches in ascending order.
        root:
            Pitch token acting as the harmonic root, normally the configured
            bass center.
        fallback_scale:
            Pitches used for a uniform random choice should ``window`` be
            empty.
        rng:
            Source of uniform draws.
        """

        self.window: Tuple[str, ...] = tuple(window)
        self.root_midi = pitch_to_midi(root)
        self.fallback_scale: Tuple[str, ...] = tuple(fallback_scale)
        self.rng = ensure_rng(rng)

    def choose_variant(self) -> bool:
        """Return ``True`` when the next measure should use the third."""

        return chance(self.rng, THIRD_PROBABILITY)

    def pitch_for_slot(self, slot: int, use_third: bool) -> str:
        """Return the bass pitch for rhythm position ``slot``."""

        target = bass_target_midi(self.root_midi, slot, use_third)
        pitch = snap_to_window(self.window, target)
        if pitch is None:
            logger.warning("Bass window is empty; choosing a random pitch instead")
            pitch = self.fallback_scale[random_index(self.rng, len(self.fallback_scale))]
        return pitch
