"""Utility helpers shared across Exercise Generator components.

This module collects lightweight functions that do not fit in more specific
modules. The CLI and the web interface share the same time signature
validation, while the generators share the random-draw helpers so every
probabilistic decision goes through one injectable source.

Usage Example
-------------
>>> from exercise_generator.utils import validate_time_signature
>>> validate_time_signature("3/4")
(3, 4)
>>> weighted_choice(["low", "high"], [0.25, 0.75], 0.5)
'high'

Revision Summary
----------------
* Added :func:`weighted_choice` so the melodic step and the phrase-ending rest
  decisions share a single cumulative-probability draw.
* Added :class:`RandomSource` and :func:`ensure_rng`. Generators never touch
  the module-level :mod:`random` functions, which keeps seeded runs
  reproducible.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol, Sequence, TypeVar

__all__ = [
    "RandomSource",
    "ensure_rng",
    "random_index",
    "chance",
    "weighted_choice",
    "validate_time_signature",
]

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything exposing ``random() -> float`` in ``[0, 1)``.

    :class:`random.Random` satisfies the protocol; tests may pass scripted
    sources returning fixed draws.
    """

    def random(self) -> float:  # pragma: no cover - protocol definition
        ...


def ensure_rng(rng: Optional[RandomSource] = None, seed: Optional[int] = None) -> RandomSource:
    """Return ``rng`` or a new :class:`random.Random` seeded with ``seed``."""

    if rng is not None:
        return rng
    return random.Random(seed)


def random_index(rng: RandomSource, length: int) -> int:
    """Return a uniformly drawn index into a sequence of ``length`` items."""

    if length <= 0:
        raise ValueError("length must be positive")
    # ``min`` guards against scripted sources that return exactly ``1.0``.
    return min(length - 1, int(rng.random() * length))


def weighted_choice(outcomes: Sequence[T], weights: Sequence[float], draw: float) -> T:
    """Return the first outcome whose cumulative weight reaches ``draw``.

    ``weights`` are expected to sum to ``1``. Should rounding leave the total
    slightly short of ``draw`` the last outcome is returned.

    Raises
    ------
    ValueError
        If the sequences are empty or differ in length.
    """

    if not outcomes or not weights:
        raise ValueError("outcomes and weights must be non-empty")
    if len(outcomes) != len(weights):
        raise ValueError("outcomes and weights must have the same length")

    cumulative = 0.0
    for outcome, weight in zip(outcomes, weights):
        cumulative += weight
        if cumulative >= draw:
            return outcome
    return outcomes[-1]


def chance(rng: RandomSource, probability: float) -> bool:
    """Return ``True`` with ``probability`` using :func:`weighted_choice`."""

    return weighted_choice((True, False), (probability, 1.0 - probability), rng.random())


def validate_time_signature(ts: str) -> tuple[int, int]:
    """Parse and validate a time signature string.

    Parameters
    ----------
    ts:
        Time signature in ``"NUM/DEN"`` form. Whitespace around the
        separator is ignored.

    Returns
    -------
    tuple[int, int]
        ``(numerator, denominator)`` when ``ts`` is valid.

    Raises
    ------
    ValueError
        If ``ts`` is malformed or uses an unsupported denominator.
    """

    # Accept input such as "4/4" or " 3 / 8 " by trimming whitespace
    parts = ts.strip().split("/")
    if len(parts) != 2:
        raise ValueError(
            "Time signature must be in the form 'numerator/denominator'."
        )

    try:
        numerator = int(parts[0])
        denominator = int(parts[1])
    except ValueError as exc:  # non-integer values
        raise ValueError(
            "Time signature must contain integer numerator and denominator."
        ) from exc

    # Restrict denominator to common simple meter values
    valid_denominators = {1, 2, 4, 8, 16}
    if numerator <= 0 or denominator not in valid_denominators:
        raise ValueError(
            "Time signature numerator must be > 0 and denominator one of 1, 2, 4, 8 or 16."
        )

    return numerator, denominator
