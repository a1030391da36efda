"""Utility functions for translating pitch tokens to MIDI numbers.

Pitches travel through the package as lowercase ``"<letter>/<octave>"``
tokens (``"c/4"`` is middle C), the same spelling notation renderers expect
for their ``keys`` field. This module converts those tokens to MIDI numbers so
the generators can measure semitone distances, and derives the stem direction
a renderer should use for each note.

Example
-------
>>> from exercise_generator.note_utils import pitch_to_midi
>>> pitch_to_midi("c/4")
60
"""

# Modification Summary
# ---------------------
# * ``pitch_to_midi`` parses ``"<letter>/<octave>"`` tokens instead of
#   scientific pitch names and raises a descriptive ``ValueError`` for
#   malformed input.
# * Added ``stem_direction`` so every rendered note carries a precomputed stem
#   and the renderer never needs pitch arithmetic of its own.
# * Added ``nearest_pitch_index`` which snaps a MIDI target onto a window of
#   allowed pitches.

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Sequence, Tuple

from .models import Voice

__all__ = [
    "LETTER_TO_SEMITONE",
    "parse_pitch",
    "is_valid_pitch",
    "pitch_to_midi",
    "stem_direction",
    "nearest_pitch_index",
    "STEM_UP",
    "STEM_DOWN",
]

logger = logging.getLogger(__name__)

# Natural pitch classes only; the exercises never use accidentals.
LETTER_TO_SEMITONE = {"c": 0, "d": 2, "e": 4, "f": 5, "g": 7, "a": 9, "b": 11}

# Octaves -1 to 9 span the MIDI range and bound the ``pitch_to_midi`` cache.
_PITCH_RE = re.compile(r"([a-g])/(-1|\d)")

STEM_UP = 1
STEM_DOWN = -1

# MIDI thresholds at or above which stems point down: B4 on the treble staff
# and D3 on the bass staff, i.e. the middle line of each staff.
_STEM_DOWN_FROM = {Voice.TREBLE: 71, Voice.BASS: 50}


def parse_pitch(token: str) -> Tuple[str, int]:
    """Split ``token`` into its letter and octave.

    Raises
    ------
    ValueError
        If ``token`` is not a lowercase ``"<letter>/<octave>"`` string with a
        letter between ``a`` and ``g`` and an octave from ``-1`` to ``9``.
    """

    match = _PITCH_RE.fullmatch(token) if isinstance(token, str) else None
    if not match:
        logger.error("Invalid pitch format: %s", token)
        raise ValueError(f"Invalid pitch: {token!r} (expected e.g. 'c/4')")
    letter, octave = match.groups()
    return letter, int(octave)


def is_valid_pitch(token: str) -> bool:
    """Return ``True`` when ``token`` is a well formed pitch token."""

    return isinstance(token, str) and _PITCH_RE.fullmatch(token) is not None


@lru_cache(maxsize=None)
def pitch_to_midi(token: str) -> int:
    """Convert a pitch token such as ``"b/3"`` into a MIDI number.

    MIDI octave numbers are offset by one relative to the token's octave, so
    ``"c/4"`` becomes ``(4 + 1) * 12 + 0 == 60``.
    """

    letter, octave = parse_pitch(token)
    return (octave + 1) * 12 + LETTER_TO_SEMITONE[letter]


def stem_direction(voice: Voice, pitch: str) -> int:
    """Return ``STEM_DOWN`` (``-1``) or ``STEM_UP`` (``1``) for ``pitch``.

    Notes on or above the middle line of their staff get downward stems.
    """

    return STEM_DOWN if pitch_to_midi(pitch) >= _STEM_DOWN_FROM[voice] else STEM_UP


def nearest_pitch_index(window: Sequence[str], target_midi: int) -> int:
    """Return the index of the pitch in ``window`` closest to ``target_midi``.

    Distance is the absolute semitone difference. Ties resolve to the first
    candidate in window order. ``-1`` is returned for an empty window.
    """

    best = -1
    best_distance = None
    for idx, pitch in enumerate(window):
        distance = abs(pitch_to_midi(pitch) - target_midi)
        if best_distance is None or distance < best_distance:
            best, best_distance = idx, distance
    return best
