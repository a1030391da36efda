#!/usr/bin/env python3
"""Flask web interface for Exercise Generator.

This module provides the browser front-end for the generator. Users choose a
time signature, measure count, per-staff pitch windows and a generation mode
through a form; the server generates the exercise and hands the score
payload to a VexFlow page that draws it. A JSON endpoint exposes the same
payload for other renderers.

Highlights:

* **CSRF protection** – Flask-WTF's :class:`~flask_wtf.csrf.CSRFProtect`
  injects and validates tokens for every POST request.
* **WSGI-friendly entry point** – :func:`create_app` builds and configures the
  application so production servers like Gunicorn can serve it directly.
* **Request size limiting** – ``MAX_CONTENT_LENGTH`` bounds incoming form
  data so oversized payloads are rejected early.
* **Rate limiting** – an in-memory, lock-protected per-IP throttle caps
  requests per minute and answers ``429`` with a ``Retry-After`` header.
* **Form state preservation** – validation failures re-render the form with
  the user's previous selections and highlight the offending input.
"""

from __future__ import annotations

import logging
import math
import os
import secrets
from threading import Lock
from time import monotonic
from typing import Dict, Iterable, Mapping, Optional, Set, Tuple

from flask import (
    Flask,
    Response,
    current_app,
    flash,
    jsonify,
    make_response,
    render_template,
    request,
)
from flask_wtf.csrf import CSRFProtect

from exercise_generator import (
    BASS_SCALE,
    TREBLE_SCALE,
    build_score,
    config_from_mapping,
    generate_measures,
)
from exercise_generator.config import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)

# Bound to each app in ``create_app``; tests toggle ``WTF_CSRF_ENABLED`` per app.
csrf = CSRFProtect()

# Per-IP request counters as ``ip -> (window_start, count)``. Guarded by
# ``REQUEST_LOCK`` because the development server handles requests on
# several threads.
REQUEST_LOG: Dict[str, Tuple[float, int]] = {}
REQUEST_LOCK = Lock()

# Length of one rate-limit window in seconds, measured with ``monotonic``.
RATE_LIMIT_WINDOW = 60.0


def _configured_limit() -> Optional[int]:
    """Return the active per-minute limit or ``None`` when throttling is off."""

    limit_raw = current_app.config.get("RATE_LIMIT_PER_MINUTE")
    if limit_raw is None:
        return None
    try:
        limit = int(limit_raw)
    except (TypeError, ValueError):
        logger.warning(
            "Invalid RATE_LIMIT_PER_MINUTE %r; disabling rate limiting", limit_raw
        )
        return None
    if limit < 0:
        logger.warning(
            "RATE_LIMIT_PER_MINUTE must be positive; disabling rate limiting (received %r)",
            limit_raw,
        )
    return limit if limit > 0 else None


def rate_limit() -> Optional[Response]:
    """Reject clients exceeding ``RATE_LIMIT_PER_MINUTE`` requests.

    Registered as a ``before_request`` hook. Returns a ``429`` response
    carrying ``Retry-After`` when the caller's window is used up, otherwise
    ``None`` so the request proceeds. Stale entries for every client are
    purged on each call to keep the log bounded.
    """

    limit = _configured_limit()
    if limit is None:
        return None

    now = monotonic()
    ip_addr = request.remote_addr or "unknown"

    with REQUEST_LOCK:
        for ip in [ip for ip, (start, _) in REQUEST_LOG.items() if now - start >= RATE_LIMIT_WINDOW]:
            del REQUEST_LOG[ip]

        window_start, count = REQUEST_LOG.get(ip_addr, (now, 0))
        if count >= limit:
            remaining = math.ceil(max(0.0, RATE_LIMIT_WINDOW - (now - window_start)))
            response = make_response("Too many requests", 429)
            # Never advise an immediate retry while the window is still open.
            response.headers["Retry-After"] = str(max(1, remaining))
            return response
        REQUEST_LOG[ip_addr] = (window_start, count + 1)

    return None


# Default values for text inputs, stored as strings for direct use in the
# HTML ``value`` attributes.
_FORM_TEXT_DEFAULTS: Dict[str, str] = {
    "timesig": str(DEFAULT_SETTINGS["timesig"]),
    "measures": str(DEFAULT_SETTINGS["measures"]),
    "treble_center": str(DEFAULT_SETTINGS["treble_center"]),
    "treble_above": str(DEFAULT_SETTINGS["treble_above"]),
    "treble_below": str(DEFAULT_SETTINGS["treble_below"]),
    "bass_center": str(DEFAULT_SETTINGS["bass_center"]),
    "bass_above": str(DEFAULT_SETTINGS["bass_above"]),
    "bass_below": str(DEFAULT_SETTINGS["bass_below"]),
    "seed": "",
}

# Default values for boolean checkboxes.
_FORM_CHECKBOX_DEFAULTS: Dict[str, bool] = {
    "phrase": bool(DEFAULT_SETTINGS["phrase"]),
    "fully_random": bool(DEFAULT_SETTINGS["fully_random"]),
    "show_treble": bool(DEFAULT_SETTINGS["show_treble"]),
    "show_bass": bool(DEFAULT_SETTINGS["show_bass"]),
}

# Form field a validation message refers to, used to highlight the input.
_ERROR_FIELDS = (
    ("Time signature", "timesig"),
    ("Number of measures", "measures"),
    ("Treble center", "treble_center"),
    ("Treble range above", "treble_above"),
    ("Treble range below", "treble_below"),
    ("Bass center", "bass_center"),
    ("Bass range above", "bass_above"),
    ("Bass range below", "bass_below"),
)


def _default_form_values() -> Dict[str, object]:
    """Return a fresh merged copy of the text and checkbox defaults."""

    return {**_FORM_TEXT_DEFAULTS, **_FORM_CHECKBOX_DEFAULTS}


def _extract_form_values(form: Mapping[str, str]) -> Dict[str, object]:
    """Return submitted form data merged with defaults for re-rendering.

    Text fields remain strings so they can be reinserted into inputs, while a
    checkbox counts as ticked whenever the browser sent any value for it.
    """

    merged = _default_form_values()
    for field in _FORM_TEXT_DEFAULTS:
        if field in form:
            merged[field] = form.get(field, "")
    for field in _FORM_CHECKBOX_DEFAULTS:
        merged[field] = bool(form.get(field))
    return merged


def _error_field(message: str) -> Set[str]:
    for prefix, field in _ERROR_FIELDS:
        if message.lower().startswith(prefix.lower()):
            return {field}
    return set()


def _parse_seed(raw: object) -> Optional[int]:
    """Return ``raw`` as an integer seed, ``None`` when blank.

    Raises
    ------
    ValueError
        If ``raw`` is neither blank nor an integer.
    """

    text = str(raw or "").strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError as exc:
        raise ValueError("Seed must be an integer.") from exc


def _build_form_context(
    form_values: Optional[Mapping[str, object]] = None,
    error_fields: Optional[Iterable[str]] = None,
) -> Dict[str, object]:
    """Assemble the template context used for rendering the index form.

    Only known field names are merged so unexpected submissions cannot
    override unrelated template variables.
    """

    context_values = _default_form_values()
    if form_values is not None:
        for name, value in form_values.items():
            if name in context_values:
                context_values[name] = value

    return {
        "treble_pitches": list(TREBLE_SCALE),
        "bass_pitches": list(BASS_SCALE),
        "form_values": context_values,
        "error_fields": set(error_fields or []),
    }


def _render_form(
    form_values: Optional[Mapping[str, object]] = None,
    error_fields: Optional[Iterable[str]] = None,
):
    """Render ``index.html`` with ``form_values`` and highlighted ``error_fields``."""

    return render_template("index.html", **_build_form_context(form_values, error_fields))


def index():
    """Render the form and handle submissions.

    On ``GET`` the form is shown with default values. A ``POST`` validates the
    submission, generates the exercise and renders the score page. Invalid
    input flashes a message and redisplays the form with the user's values.
    """

    if request.method == "POST":
        form_values = _extract_form_values(request.form)
        try:
            seed = _parse_seed(form_values.get("seed"))
        except ValueError as exc:
            flash(str(exc))
            return _render_form(form_values, {"seed"})
        try:
            config = config_from_mapping(form_values)
        except ValueError as exc:
            flash(str(exc))
            return _render_form(form_values, _error_field(str(exc)))

        if not (config.show_treble or config.show_bass):
            flash("Select at least one staff to display.")
            return _render_form(form_values, {"show_treble", "show_bass"})

        measures = generate_measures(config, seed=seed)
        logger.info(
            "Generated %d measures in %s mode for %s",
            len(measures),
            config.mode.value,
            request.remote_addr,
        )
        return render_template(
            "score.html", score=build_score(measures, config), form_values=form_values
        )

    return _render_form()


def api_exercise():
    """Return a generated exercise as JSON.

    Query parameters use the same names as the form fields. Missing values
    fall back to the defaults and boolean flags accept ``1``, ``true``,
    ``yes`` or ``on``. Invalid input yields HTTP 400 with an ``error`` field.
    """

    params = request.args.to_dict()
    try:
        seed = _parse_seed(params.pop("seed", None))
        config = config_from_mapping(params)
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400
    measures = generate_measures(config, seed=seed)
    return jsonify(build_score(measures, config))


def create_app() -> Flask:
    """Return a configured Flask application.

    In production (non-debug) mode ``FLASK_SECRET`` must be set; a missing
    value triggers a ``CRITICAL`` log entry and :class:`RuntimeError` so the
    application never runs with an insecure session key. ``MAX_UPLOAD_MB``
    bounds request size and ``RATE_LIMIT_PER_MINUTE`` optionally throttles
    clients.

    Returns:
        Flask: Application serving the form, score page and JSON API.
    Raises:
        RuntimeError: If ``FLASK_SECRET`` is absent when debug mode is
            disabled.
    """

    app = Flask(__name__, template_folder="templates", static_folder="static")

    secret = os.environ.get("FLASK_SECRET")
    try:
        max_mb = int(os.environ.get("MAX_UPLOAD_MB", "1"))
    except ValueError:
        max_mb = 1
        logger.warning("Invalid MAX_UPLOAD_MB value; defaulting to 1 MB.")
    rate_limit_env = os.environ.get("RATE_LIMIT_PER_MINUTE")
    try:
        rate_limit_per_minute = int(rate_limit_env) if rate_limit_env else None
    except ValueError:
        logger.warning(
            "RATE_LIMIT_PER_MINUTE must be an integer. Disabling rate limiting."
        )
        rate_limit_per_minute = None

    if not secret:
        if not app.debug:
            logger.critical("FLASK_SECRET environment variable must be set in production.")
            raise RuntimeError("Missing FLASK_SECRET")
        secret = secrets.token_urlsafe(32)
        logger.warning(
            "FLASK_SECRET environment variable not set. "
            "Using a randomly generated key; sessions will not persist across restarts."
        )
    app.secret_key = secret
    app.config["MAX_CONTENT_LENGTH"] = max_mb * 1024 * 1024
    app.config["RATE_LIMIT_PER_MINUTE"] = rate_limit_per_minute

    csrf.init_app(app)

    app.add_url_rule("/", view_func=index, methods=["GET", "POST"])
    app.add_url_rule("/api/exercise", view_func=api_exercise, methods=["GET"])

    app.before_request(rate_limit)

    @app.errorhandler(413)
    def handle_request_too_large(_err):
        """Reject oversized form posts with a short plain-text body."""
        return "Request exceeds configured size limit.", 413

    return app


if __name__ == "__main__":  # pragma: no cover - manual usage
    create_app().run(debug=True)
