"""Tests for root/fifth/third bass selection."""

import importlib
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

harmony = importlib.import_module("exercise_generator.harmony_generator")
scales = importlib.import_module("exercise_generator.scales")
Voice = importlib.import_module("exercise_generator.models").Voice


@pytest.mark.parametrize(
    "slot, use_third, expected",
    [
        (0, False, 48),
        (1, False, 55),
        (2, False, 48),
        (3, False, 55),
        (0, True, 48),
        (1, True, 55),
        (2, True, 52),
        (3, True, 55),
        (6, True, 52),
        (4, True, 48),
    ],
)
def test_bass_target_midi(slot, use_third, expected):
    """Even slots take the root, odd slots the fifth, slot 2 mod 4 the third."""
    assert harmony.bass_target_midi(48, slot, use_third) == expected


def test_snap_to_window():
    window = ("c/3", "d/3")
    assert harmony.snap_to_window(window, 48) == "c/3"
    assert harmony.snap_to_window(window, 55) == "d/3"
    assert harmony.snap_to_window((), 55) is None


def test_snap_to_window_tie_takes_first_candidate():
    """D3 is two semitones from both C3 and E3."""
    assert harmony.snap_to_window(("c/3", "e/3"), 50) == "c/3"
    assert harmony.snap_to_window(("d/3", "f/3"), 52) == "f/3"


def test_pitch_for_slot_in_wide_window():
    window = scales.resolve_pitch_window(Voice.BASS, "c/3", above=4, below=0)
    gen = harmony.HarmonyGenerator(window, "c/3", scales.BASS_SCALE.pitches)
    assert [gen.pitch_for_slot(s, False) for s in range(4)] == ["c/3", "g/3", "c/3", "g/3"]
    assert [gen.pitch_for_slot(s, True) for s in range(4)] == ["c/3", "g/3", "e/3", "g/3"]


def test_choose_variant(scripted_rng):
    gen = harmony.HarmonyGenerator(("c/3",), "c/3", (), scripted_rng([0.1, 0.9]))
    assert gen.choose_variant() is True
    assert gen.choose_variant() is False


def test_empty_window_falls_back_to_full_scale(scripted_rng, caplog):
    caplog.set_level(logging.WARNING)
    gen = harmony.HarmonyGenerator(
        (), "c/3", scales.BASS_SCALE.pitches, scripted_rng([0.0])
    )
    assert gen.pitch_for_slot(1, False) == scales.BASS_SCALE.at(0)
    assert "Bass window is empty" in caplog.text
