#!/usr/bin/env python3
"""Exercise Generator library.

This package creates short, randomized two-staff exercises for sight-reading
practice. A typical workflow is to build a :class:`GenerationConfig` (or let
:func:`config_from_mapping` validate raw user input), call
:func:`generate_measures` and pass the result to :func:`build_score` for a
browser renderer or :func:`format_score_text` for the terminal. Both a command
line interface and a Flask web interface wrap these calls so users can
practise without writing code.

Underlying Algorithm
--------------------
Every measure starts from a beat budget taken from the time signature. In
the default modes a :class:`RhythmPartitioner` fills that budget with whole,
half and quarter notes (and the occasional rest) and each note receives a
uniformly random pitch from its staff's *pitch window*, the slice of the
staff's scale around the chosen center pitch. In phrase mode the rhythm comes
from a small set of curated patterns shared by both staves; the treble walks
mostly by step through its window and the bass alternates root and fifth,
sometimes adding the third.

Algorithm Pseudocode
--------------------
The following outlines :func:`generate_measures`::

    if config is invalid:
        return []
    if config.phrase_mode:
        return PhraseGenerator(rng).generate(beats, measures, config)
    return IndependentMeasureGenerator(rng).generate(
        beats, measures, config, fully_independent=config.fully_random)

Features include:
- Exact beat budgets for every measure and every voice.
- Per-staff pitch windows derived from a center pitch and two extents.
- Shared-rhythm, fully independent and phrase-coherent modes.
- Injectable random source for reproducible exercises.
- Renderer payloads carrying stem directions and rest positions.
- CLI and Flask web interfaces with saved user settings.
"""

__version__ = "0.1.0"

# ---------------------------------------------------------------
# Modification Summary
# ---------------------------------------------------------------
# * ``generate_measures`` receives the configuration as an immutable
#   ``GenerationConfig`` read once per call instead of querying form state
#   from inside the generators.
# * Every generator draws from an injected random source; ``seed`` builds a
#   seeded ``random.Random`` for reproducible output.
# * Invalid beat or measure counts reaching ``generate_measures`` produce an
#   empty exercise and a warning rather than an exception.
# * User settings persist in ``~/.exercise_generator_settings.json`` unless
#   ``EXERCISE_SETTINGS_FILE`` points elsewhere.
# ---------------------------------------------------------------

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from .durations import DurationKind, NOTE_KINDS, REST_KINDS  # noqa: F401
from .models import (  # noqa: F401
    Event,
    GenerationConfig,
    GenerationMode,
    Measure,
    Voice,
    VoiceRange,
)
from .note_utils import pitch_to_midi, stem_direction, parse_pitch  # noqa: F401
from .utils import RandomSource, ensure_rng, validate_time_signature, weighted_choice  # noqa: F401
from .scales import (  # noqa: F401
    BASS_SCALE,
    TREBLE_SCALE,
    ScaleTable,
    resolve_pitch_window,
    scale_for,
)
from .rhythm_engine import RhythmPartitioner, partition_beats  # noqa: F401
from .independent import IndependentMeasureGenerator
from .phrase_planner import PhraseGenerator, PHRASE_RHYTHMS  # noqa: F401
from .config import DEFAULT_SETTINGS, config_from_mapping, config_to_settings  # noqa: F401
from .rendering import build_score, format_score_text  # noqa: F401

logger = logging.getLogger(__name__)

# Default path for storing user preferences
# The file lives in the user's home directory so settings persist
# between runs of the application.
env_path = os.environ.get("EXERCISE_SETTINGS_FILE")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".exercise_generator_settings.json"


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> dict:
    """Load saved user settings from ``path`` if it exists.

    @param path (Path): Location of the settings file.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """
    # Prefer the user's saved options but fall back to an empty
    # dictionary when the settings file is missing or unreadable.
    if path.is_file():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.error("Could not load settings: %s", exc)
            return {}
        if isinstance(data, dict):
            return data
        logger.error("Ignoring settings file %s: expected a JSON object", path)
    return {}


def save_settings(settings: dict, path: Path = DEFAULT_SETTINGS_FILE) -> None:
    """Save user ``settings`` to ``path`` as JSON.

    @param settings (dict): Options to be persisted.
    @param path (Path): Destination file path.
    @returns None: Function does not return a value.
    """
    # Any OSError is logged but ignored so failing to save
    # preferences never prevents exercise generation.
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2)
    except OSError as exc:
        logger.error("Could not save settings: %s", exc)


def generate_measures(
    config: GenerationConfig,
    rng: Optional[RandomSource] = None,
    *,
    seed: Optional[int] = None,
) -> List[Measure]:
    """Generate the measures described by ``config``.

    @param config (GenerationConfig): Read-only snapshot of the user's choices.
    @param rng (RandomSource): Optional source of uniform draws. Any object
        with a ``random()`` method returning floats in ``[0, 1)`` works.
    @param seed (int): Seed for a new :class:`random.Random` when ``rng`` is
        not supplied.
    @returns List[Measure]: Measures in performance order. Empty when the beat
        count or measure count is not positive.
    """

    beats = config.beats_per_measure
    num_measures = config.num_measures
    if beats <= 0 or num_measures <= 0:
        logger.warning(
            "Nothing to generate for %s beats per measure and %s measures",
            beats,
            num_measures,
        )
        return []

    rng = ensure_rng(rng, seed)
    mode = config.mode
    logger.debug(
        "Generating %d measures of %s in %s mode", num_measures, config.time_signature, mode.value
    )
    if mode is GenerationMode.PHRASE:
        return PhraseGenerator(rng).generate(beats, num_measures, config)
    return IndependentMeasureGenerator(rng).generate(
        beats,
        num_measures,
        config,
        fully_independent=mode is GenerationMode.FULLY_INDEPENDENT,
    )


def run_cli():
    from .cli import run_cli as _run_cli
    _run_cli()


def main():
    from .cli import main as _main
    _main()


if __name__ == "__main__":
    main()
