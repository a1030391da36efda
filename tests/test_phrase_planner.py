"""Tests for phrase-coherent measure generation."""

import importlib
import random
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

phrase = importlib.import_module("exercise_generator.phrase_planner")
models = importlib.import_module("exercise_generator.models")
scales = importlib.import_module("exercise_generator.scales")
DurationKind = importlib.import_module("exercise_generator.durations").DurationKind
Voice = models.Voice


def _config(**kwargs):
    return models.GenerationConfig(phrase_mode=True, **kwargs)


def test_catalog_patterns_sum_to_meter():
    for beats, patterns in phrase.PHRASE_RHYTHMS.items():
        for pattern in patterns:
            assert sum(pattern) == beats


def test_rhythms_for_unknown_meter_uses_quarters():
    assert phrase.rhythms_for(5) == ((1, 1, 1, 1, 1),)
    assert phrase.rhythms_for(4) == phrase.PHRASE_RHYTHMS[4]


def test_choose_rhythm_picks_from_catalog(scripted_rng):
    rng = random.Random(3)
    assert all(phrase.choose_rhythm(4, rng) in phrase.PHRASE_RHYTHMS[4] for _ in range(20))
    assert phrase.choose_rhythm(3, scripted_rng([0.9])) == (1, 2)
    assert phrase.choose_rhythm(3, scripted_rng([0.1])) == (1, 1, 1)


def test_three_four_pattern_drives_both_voices(scripted_rng):
    """Selecting the quarter-half pattern gives beats [1, 2] in both staves."""
    # A constant 0.9 picks pattern index 2, steps the melody up, keeps every
    # final slot a note and skips the third.
    gen = phrase.PhraseGenerator(scripted_rng([0.9]))
    (measure,) = gen.generate(3, 1, _config(beats_per_measure=3))

    assert [e.beats for e in measure.treble] == [1, 2]
    assert [e.beats for e in measure.bass] == [1, 2]
    assert [(e.pitch, e.kind) for e in measure.treble] == [
        ("d/4", DurationKind.QUARTER),
        ("e/4", DurationKind.HALF),
    ]
    assert [(e.pitch, e.kind) for e in measure.bass] == [
        ("c/3", DurationKind.QUARTER),
        ("d/3", DurationKind.HALF),
    ]


def test_final_slot_rests_keep_duration(scripted_rng):
    """Phrase-ending rests replace the last note without changing its length."""
    rng = scripted_rng([0.9, 0.5, 0.1, 0.9, 0.05])
    (measure,) = phrase.PhraseGenerator(rng).generate(3, 1, _config(beats_per_measure=3))

    assert measure.treble[0].pitch == "c/4"
    assert measure.treble[1].kind is DurationKind.HALF_REST
    assert measure.bass[0].pitch == "c/3"
    assert measure.bass[1].kind is DurationKind.HALF_REST
    assert measure.is_aligned()
    assert rng.calls == 5


def test_third_variant_in_wide_bass_window(scripted_rng):
    rng = scripted_rng([0.0, 0.5, 0.5, 0.5, 0.5, 0.5, 0.1, 0.5])
    config = _config(bass=models.VoiceRange("c/3", 4, 0))
    (measure,) = phrase.PhraseGenerator(rng).generate(4, 1, config)

    assert [e.pitch for e in measure.treble] == ["c/4"] * 4
    assert [e.pitch for e in measure.bass] == ["c/3", "g/3", "e/3", "g/3"]
    assert all(e.kind is DurationKind.QUARTER for e in measure.bass)


@pytest.mark.parametrize("beats", [2, 3, 4, 5, 6])
def test_measures_are_aligned_and_full(beats):
    config = _config(beats_per_measure=beats)
    for seed in range(30):
        measures = phrase.PhraseGenerator(random.Random(seed)).generate(beats, 4, config)
        assert len(measures) == 4
        for m in measures:
            assert m.is_aligned()
            assert m.beats(Voice.TREBLE) == beats
            assert m.beats(Voice.BASS) == beats
            assert tuple(e.beats for e in m.treble) in phrase.rhythms_for(beats)


def test_only_final_slot_may_rest():
    config = _config()
    for seed in range(50):
        for m in phrase.PhraseGenerator(random.Random(seed)).generate(4, 4, config):
            for voice in (Voice.TREBLE, Voice.BASS):
                events = m.events(voice)
                assert not any(e.is_rest for e in events[:-1])


def test_melody_moves_stepwise_and_bass_stays_in_window():
    config = _config(
        treble=models.VoiceRange("e/4", 4, 4), bass=models.VoiceRange("c/3", 3, 2)
    )
    treble_window = scales.window_for(Voice.TREBLE, config.treble)
    bass_window = scales.window_for(Voice.BASS, config.bass)
    for seed in range(30):
        measures = phrase.PhraseGenerator(random.Random(seed)).generate(4, 6, config)
        melody = [e.pitch for m in measures for e in m.treble if not e.is_rest]
        positions = [treble_window.index(p) for p in melody]
        assert all(abs(a - b) <= 2 for a, b in zip(positions, positions[1:]))
        assert all(
            e.pitch in bass_window for m in measures for e in m.bass if not e.is_rest
        )


def test_seeded_generation_is_reproducible():
    config = _config()
    first = phrase.PhraseGenerator(random.Random(11)).generate(4, 4, config)
    second = phrase.PhraseGenerator(random.Random(11)).generate(4, 4, config)
    assert first == second


def test_rhythm_is_drawn_per_measure(scripted_rng):
    """Each measure draws its rhythm right before its own treble and bass."""
    rng = scripted_rng(
        [0.9, 0.5, 0.5, 0.5, 0.9, 0.5]  # (1, 2), notes only, no third
        + [0.1, 0.5, 0.5, 0.5, 0.5, 0.9, 0.5]  # (1, 1, 1), notes only, no third
    )
    measures = phrase.PhraseGenerator(rng).generate(3, 2, _config(beats_per_measure=3))

    assert [tuple(e.beats for e in m.treble) for m in measures] == [(1, 2), (1, 1, 1)]
    assert all(m.is_aligned() for m in measures)
    assert all(not e.is_rest for m in measures for e in m.treble + m.bass)
    assert rng.calls == 13


def test_skips_are_rare_in_melody():
    """Moves of two window positions stay a small minority of melody motion."""
    config = _config(treble=models.VoiceRange("e/4", 4, 4))
    treble_window = scales.window_for(Voice.TREBLE, config.treble)
    moves = []
    for seed in range(40):
        measures = phrase.PhraseGenerator(random.Random(seed)).generate(4, 8, config)
        positions = [
            treble_window.index(e.pitch) for m in measures for e in m.treble if not e.is_rest
        ]
        moves.extend(abs(a - b) for a, b in zip(positions, positions[1:]))

    skips = moves.count(2)
    assert 0 < skips / len(moves) < 0.2
    assert moves.count(1) > 3 * skips
