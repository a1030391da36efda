"""Shared fixtures for the Exercise Generator test suite."""

import itertools

import pytest


class ScriptedRandom:
    """Random source returning ``values`` in order, repeating the sequence."""

    def __init__(self, values):
        self.values = list(values)
        self._cycle = itertools.cycle(self.values)
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return next(self._cycle)


@pytest.fixture
def scripted_rng():
    """Return a factory building :class:`ScriptedRandom` instances."""

    return ScriptedRandom
