"""Hand generated measures to a notation renderer.

Drawing staves and glyphs is left to a client-side renderer (the web page
uses VexFlow). This module prepares everything that renderer needs so it can
draw each event without any music arithmetic of its own: the duration code,
the staff position (``keys``) including where rests sit, and the stem
direction of every note. A plain-text view is provided for the terminal.

Measures are always delivered in performance order and each voice's events
left to right.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from .models import Event, GenerationConfig, Measure, Voice
from .note_utils import stem_direction

__all__ = ["REST_POSITIONS", "event_payload", "build_score", "format_score_text"]

# Staff position used to draw rests: the middle line of each staff.
REST_POSITIONS = {Voice.TREBLE: "b/4", Voice.BASS: "d/3"}


def event_payload(event: Event) -> Dict[str, Any]:
    """Return the JSON-ready description of ``event``."""

    if event.is_rest:
        keys = [REST_POSITIONS[event.voice]]
        stem = None
    else:
        keys = [event.pitch]
        stem = stem_direction(event.voice, event.pitch)
    return {
        "duration": event.kind.code,
        "beats": event.beats,
        "is_rest": event.is_rest,
        "pitch": event.pitch,
        "keys": keys,
        "stem": stem,
    }


def build_score(measures: Sequence[Measure], config: GenerationConfig) -> Dict[str, Any]:
    """Return the payload consumed by the score renderer.

    Hidden voices are sent as empty lists so the renderer can skip their
    staff entirely.
    """

    rendered: List[Dict[str, Any]] = []
    for measure in measures:
        rendered.append(
            {
                "treble": [event_payload(e) for e in measure.treble] if config.show_treble else [],
                "bass": [event_payload(e) for e in measure.bass] if config.show_bass else [],
            }
        )
    return {
        "time_signature": config.time_signature,
        "beats": config.beats_per_measure,
        "beat_value": config.beat_unit,
        "show_treble": config.show_treble,
        "show_bass": config.show_bass,
        "measures": rendered,
    }


def _format_event(event: Event) -> str:
    if event.is_rest:
        return f"rest:{event.kind.code}"
    return f"{event.pitch}:{event.kind.code}"


def format_score_text(measures: Sequence[Measure], config: GenerationConfig) -> str:
    """Return a compact, human-readable listing of ``measures``.

    Example output::

        4/4, 2 measures
        1 treble | c/4:q d/4:h e/4:q
        1 bass   | c/3:h g/3:h
    """

    lines = [f"{config.time_signature}, {len(measures)} measures"]
    for number, measure in enumerate(measures, start=1):
        if config.show_treble:
            lines.append(
                f"{number} treble | " + " ".join(_format_event(e) for e in measure.treble)
            )
        if config.show_bass:
            lines.append(
                f"{number} bass   | " + " ".join(_format_event(e) for e in measure.bass)
            )
    return "\n".join(lines)
