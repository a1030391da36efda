"""Tests for helper functions in ``exercise_generator.utils``."""

import importlib
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

utils = importlib.import_module("exercise_generator.utils")


def test_validate_time_signature_accepts_whitespace():
    """Valid signatures are parsed into integer tuples."""
    assert utils.validate_time_signature("3/4") == (3, 4)
    assert utils.validate_time_signature(" 6 / 8 ") == (6, 8)


@pytest.mark.parametrize("bad", ["4", "4/4/4", "a/4", "0/4", "4/3", "-2/4"])
def test_validate_time_signature_rejects(bad):
    with pytest.raises(ValueError):
        utils.validate_time_signature(bad)


def test_weighted_choice_uses_cumulative_weights():
    outcomes = ("a", "b", "c")
    weights = (0.2, 0.5, 0.3)
    assert utils.weighted_choice(outcomes, weights, 0.0) == "a"
    assert utils.weighted_choice(outcomes, weights, 0.2) == "a"
    assert utils.weighted_choice(outcomes, weights, 0.21) == "b"
    assert utils.weighted_choice(outcomes, weights, 0.99) == "c"


def test_weighted_choice_falls_back_to_last_outcome():
    """Weights summing short of the draw return the final outcome."""
    assert utils.weighted_choice(("x", "y"), (0.1, 0.1), 0.9) == "y"


@pytest.mark.parametrize(
    "outcomes, weights", [((), ()), (("a",), (0.5, 0.5)), (("a", "b"), ())]
)
def test_weighted_choice_rejects_bad_input(outcomes, weights):
    with pytest.raises(ValueError):
        utils.weighted_choice(outcomes, weights, 0.5)


def test_random_index_bounds(scripted_rng):
    """Draws map onto indices and a draw of ``1.0`` stays in range."""
    assert utils.random_index(scripted_rng([0.0]), 3) == 0
    assert utils.random_index(scripted_rng([0.5]), 3) == 1
    assert utils.random_index(scripted_rng([1.0]), 3) == 2
    with pytest.raises(ValueError):
        utils.random_index(scripted_rng([0.5]), 0)


def test_chance(scripted_rng):
    assert utils.chance(scripted_rng([0.1]), 0.25) is True
    assert utils.chance(scripted_rng([0.3]), 0.25) is False


def test_ensure_rng():
    """An explicit source is returned untouched; seeds are reproducible."""
    source = random.Random(1)
    assert utils.ensure_rng(source) is source
    first = utils.ensure_rng(seed=42).random()
    second = utils.ensure_rng(seed=42).random()
    assert first == second
