"""Turn raw user choices into a validated :class:`GenerationConfig`.

The CLI, the web form and the saved settings file all supply the same
handful of values as loosely typed strings, integers and booleans. They are
normalised here in one place so every entry point rejects bad input with the
same message. Validation failures raise ``ValueError``; callers decide whether
to log and exit (CLI) or flash and re-render (web).

Example
-------
>>> cfg = config_from_mapping({"timesig": "3/4", "measures": 2, "phrase": True})
>>> cfg.beats_per_measure, cfg.mode.value
(3, 'phrase')
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .models import GenerationConfig, VoiceRange
from .note_utils import is_valid_pitch
from .utils import validate_time_signature

__all__ = ["DEFAULT_SETTINGS", "SETTING_KEYS", "config_from_mapping", "config_to_settings"]

# Defaults mirror the values the practice page starts with. Keys double as
# the names used in the settings file and the web form.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "timesig": "4/4",
    "measures": 4,
    "treble_center": "c/4",
    "treble_above": 2,
    "treble_below": 1,
    "bass_center": "c/3",
    "bass_above": 1,
    "bass_below": 0,
    "phrase": False,
    "fully_random": False,
    "show_treble": True,
    "show_bass": True,
}

SETTING_KEYS = tuple(DEFAULT_SETTINGS)

_LABELS = {
    "measures": "Number of measures",
    "treble_above": "Treble range above",
    "treble_below": "Treble range below",
    "bass_above": "Bass range above",
    "bass_below": "Bass range below",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{_LABELS[name]} must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{_LABELS[name]} must be an integer.") from exc


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_pitch(name: str, value: Any) -> str:
    token = str(value).strip().lower()
    if not is_valid_pitch(token):
        raise ValueError(
            f"{name.capitalize()} center pitch must look like 'c/4' (letter a-g, slash, octave -1 to 9)."
        )
    return token


def config_from_mapping(values: Mapping[str, Any]) -> GenerationConfig:
    """Validate ``values`` and return a :class:`GenerationConfig`.

    Missing keys fall back to :data:`DEFAULT_SETTINGS`; unknown keys are
    ignored.

    Raises
    ------
    ValueError
        If the time signature is malformed, the measure count is not a
        positive integer, a center pitch is not a ``"<letter>/<octave>"``
        token or a range extent is negative.
    """

    merged = {**DEFAULT_SETTINGS}
    merged.update({k: v for k, v in values.items() if k in DEFAULT_SETTINGS and v is not None})

    beats, beat_unit = validate_time_signature(str(merged["timesig"]))

    measures = _as_int("measures", merged["measures"])
    if measures <= 0:
        raise ValueError("Number of measures must be greater than 0.")

    extents = {}
    for key in ("treble_above", "treble_below", "bass_above", "bass_below"):
        extents[key] = _as_int(key, merged[key])
        if extents[key] < 0:
            raise ValueError(f"{_LABELS[key]} must be non-negative.")

    return GenerationConfig(
        beats_per_measure=beats,
        beat_unit=beat_unit,
        num_measures=measures,
        treble=VoiceRange(
            _as_pitch("treble", merged["treble_center"]),
            extents["treble_above"],
            extents["treble_below"],
        ),
        bass=VoiceRange(
            _as_pitch("bass", merged["bass_center"]),
            extents["bass_above"],
            extents["bass_below"],
        ),
        phrase_mode=_as_bool(merged["phrase"]),
        fully_random=_as_bool(merged["fully_random"]),
        show_treble=_as_bool(merged["show_treble"]),
        show_bass=_as_bool(merged["show_bass"]),
    )


def config_to_settings(config: GenerationConfig) -> Dict[str, Any]:
    """Return the settings-file representation of ``config``."""

    return {
        "timesig": config.time_signature,
        "measures": config.num_measures,
        "treble_center": config.treble.center,
        "treble_above": config.treble.above,
        "treble_below": config.treble.below,
        "bass_center": config.bass.center,
        "bass_above": config.bass.above,
        "bass_below": config.bass.below,
        "phrase": config.phrase_mode,
        "fully_random": config.fully_random,
        "show_treble": config.show_treble,
        "show_bass": config.show_bass,
    }
