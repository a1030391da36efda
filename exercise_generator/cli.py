"""Command line helpers for Exercise Generator.

Modification summary
--------------------
* Options left unset on the command line fall back to the saved settings file
  and then to :data:`~exercise_generator.config.DEFAULT_SETTINGS`.
* ``--save-settings`` stores the validated choices so the next run and the web
  interface start from them.
* Validation errors are logged and end the process with exit status ``1``.
* Every on/off option has an opposite (``--no-phrase``, ``--show-bass`` ...)
  so a choice stored in the settings file can be undone for one run.

This module implements the console entry points for the project. The
``run_cli`` function parses command line arguments, generates an exercise and
prints it either as a readable listing or as the JSON payload a notation
renderer consumes. ``--web`` starts the Flask interface instead.

Example
-------
Running ``python -m exercise_generator --timesig 3/4 --measures 4 --phrase \
    --seed 7`` prints a four-measure phrase exercise in 3/4. The same seed
always produces the same exercise.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import (
    BASS_SCALE,
    DEFAULT_SETTINGS_FILE,
    TREBLE_SCALE,
    build_score,
    config_from_mapping,
    config_to_settings,
    format_score_text,
    generate_measures,
    load_settings,
    save_settings,
)

__all__ = ["build_parser", "run_cli", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser used by :func:`run_cli`."""

    parser = argparse.ArgumentParser(
        description="Generate a random sight-reading exercise for treble and bass staves."
    )
    parser.add_argument("--list-pitches", action="store_true", help="List the pitches available on each staff and exit")
    parser.add_argument("--timesig", type=str, help="Time signature in numerator/denominator format (e.g., 4/4).")
    parser.add_argument("--measures", type=int, help="Number of measures to generate.")
    parser.add_argument("--treble-center", type=str, help="Center pitch of the treble window (e.g., c/4).")
    parser.add_argument("--treble-above", type=int, help="Scale steps allowed above the treble center.")
    parser.add_argument("--treble-below", type=int, help="Scale steps allowed below the treble center.")
    parser.add_argument("--bass-center", type=str, help="Center pitch of the bass window (e.g., c/3).")
    parser.add_argument("--bass-above", type=int, help="Scale steps allowed above the bass center.")
    parser.add_argument("--bass-below", type=int, help="Scale steps allowed below the bass center.")
    parser.add_argument("--phrase", action=argparse.BooleanOptionalAction, default=None, help="Generate stepwise melody over root/fifth bass with a shared rhythm (--no-phrase turns a saved choice off).")
    parser.add_argument("--fully-random", action=argparse.BooleanOptionalAction, default=None, help="Give each staff its own independent rhythm.")
    parser.add_argument("--show-treble", dest="show_treble", action="store_true", default=None, help="Include the treble staff in the output.")
    parser.add_argument("--hide-treble", dest="show_treble", action="store_false", default=None, help="Leave the treble staff out of the output.")
    parser.add_argument("--show-bass", dest="show_bass", action="store_true", default=None, help="Include the bass staff in the output.")
    parser.add_argument("--hide-bass", dest="show_bass", action="store_false", default=None, help="Leave the bass staff out of the output.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output")
    parser.add_argument("--format", choices=("text", "json"), default="text", help="Output format (default: text).")
    parser.add_argument("--settings-file", type=str, help="Path to the JSON settings file")
    parser.add_argument("--save-settings", action="store_true", help="Remember these options for future runs")
    parser.add_argument("--web", action="store_true", help="Serve the web interface instead of printing an exercise")
    parser.add_argument("--port", type=int, default=5000, help="Port for --web (default: 5000).")
    return parser


def _collect_options(args: argparse.Namespace, saved: Dict[str, Any]) -> Dict[str, Any]:
    """Merge command line values over ``saved`` settings."""

    options = dict(saved)
    explicit = {
        "timesig": args.timesig,
        "measures": args.measures,
        "treble_center": args.treble_center,
        "treble_above": args.treble_above,
        "treble_below": args.treble_below,
        "bass_center": args.bass_center,
        "bass_above": args.bass_above,
        "bass_below": args.bass_below,
        "phrase": args.phrase,
        "fully_random": args.fully_random,
        "show_treble": args.show_treble,
        "show_bass": args.show_bass,
    }
    options.update({k: v for k, v in explicit.items() if v is not None})
    return options


def run_cli(argv: Optional[List[str]] = None) -> None:
    """Parse CLI arguments and print a generated exercise.

    When ``--web`` is supplied the Flask development server is started
    instead.
    """

    args = build_parser().parse_args(argv)

    if args.list_pitches:
        print("treble: " + " ".join(TREBLE_SCALE))
        print("bass: " + " ".join(BASS_SCALE))
        return

    if args.web:
        from .web_gui import create_app

        try:
            app = create_app()
        except RuntimeError as exc:
            logging.error("Cannot start the web interface: %s", exc)
            sys.exit(1)
        app.run(port=args.port)
        return

    settings_path = Path(args.settings_file).expanduser() if args.settings_file else DEFAULT_SETTINGS_FILE
    saved = load_settings(settings_path)

    try:
        config = config_from_mapping(_collect_options(args, saved))
    except ValueError as exc:
        logging.error(str(exc))
        sys.exit(1)

    if args.save_settings:
        save_settings(config_to_settings(config), settings_path)

    measures = generate_measures(config, seed=args.seed)
    if args.format == "json":
        print(json.dumps(build_score(measures, config), indent=2))
    else:
        print(format_score_text(measures, config))
    logging.info("Exercise generation complete.")


def main() -> None:
    """Console entry point configuring logging before running the CLI."""

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    run_cli()
