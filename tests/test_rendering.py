"""Tests for the renderer payload and the text listing."""

import importlib
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

rendering = importlib.import_module("exercise_generator.rendering")
models = importlib.import_module("exercise_generator.models")
DurationKind = importlib.import_module("exercise_generator.durations").DurationKind
Event = models.Event
Voice = models.Voice


def _measure():
    return models.Measure(
        treble=(
            Event.note(DurationKind.HALF, Voice.TREBLE, "c/5"),
            Event.note(DurationKind.QUARTER, Voice.TREBLE, "a/4"),
            Event.rest(DurationKind.QUARTER_REST, Voice.TREBLE),
        ),
        bass=(Event.note(DurationKind.WHOLE, Voice.BASS, "c/3"),),
    )


def test_event_payload_for_notes_and_rests():
    note = rendering.event_payload(Event.note(DurationKind.HALF, Voice.TREBLE, "c/5"))
    assert note == {
        "duration": "h",
        "beats": 2,
        "is_rest": False,
        "pitch": "c/5",
        "keys": ["c/5"],
        "stem": -1,
    }
    rest = rendering.event_payload(Event.rest(DurationKind.WHOLE_REST, Voice.BASS))
    assert rest["keys"] == ["d/3"]
    assert rest["stem"] is None
    assert rest["duration"] == "wr"


def test_build_score_structure():
    cfg = models.GenerationConfig(num_measures=1)
    score = rendering.build_score([_measure()], cfg)
    assert score["time_signature"] == "4/4"
    assert (score["beats"], score["beat_value"]) == (4, 4)
    (measure,) = score["measures"]
    assert [e["duration"] for e in measure["treble"]] == ["h", "q", "qr"]
    assert [e["stem"] for e in measure["treble"]] == [-1, 1, None]
    assert measure["bass"][0]["stem"] == 1
    # The payload must be JSON serialisable for the web page.
    json.dumps(score)


def test_hidden_voice_is_empty():
    cfg = models.GenerationConfig(show_bass=False)
    score = rendering.build_score([_measure()], cfg)
    assert score["show_bass"] is False
    assert score["measures"][0]["bass"] == []
    assert len(score["measures"][0]["treble"]) == 3


def test_format_score_text():
    cfg = models.GenerationConfig()
    text = rendering.format_score_text([_measure(), _measure()], cfg)
    lines = text.splitlines()
    assert lines[0] == "4/4, 2 measures"
    assert lines[1] == "1 treble | c/5:h a/4:q rest:qr"
    assert lines[2] == "1 bass   | c/3:w"
    assert len(lines) == 5


def test_format_score_text_skips_hidden_voice():
    cfg = models.GenerationConfig(show_treble=False)
    lines = rendering.format_score_text([_measure()], cfg).splitlines()
    assert lines == ["4/4, 1 measures", "1 bass   | c/3:w"]
