from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Flask, Response, request
from jinja2 import Environment

from .cache import WorkoutCache
from .calendar_feed import render_calendar
from .capture import CaptureFn, TrainingPeaksCapture
from .config import Settings
from .markdown_report import render_markdown
from .service import UnknownAccountError, load_result, structured_payload


logger = logging.getLogger(__name__)

FORMAT_JSON = "json"
FORMAT_MARKDOWN = "md"
FORMAT_CALENDAR = "ics"
FORMAT_SUFFIXES = {f".{FORMAT_MARKDOWN}": FORMAT_MARKDOWN, f".{FORMAT_CALENDAR}": FORMAT_CALENDAR}
UNGATED_PATHS = {"/health"}

INDEX_TEMPLATE = Environment(autoescape=True).from_string(
    """
    <h1>TrainingPeaks Workout API</h1>
    <h2>Available Users</h2>
    <ul>
    {%- for account in accounts %}
      <li><strong>{{ account }}</strong>
        <ul>
          <li><a href="/{{ account }}?secret={{ secret }}">/{{ account }}</a> - JSON</li>
          <li><a href="/{{ account }}.md?secret={{ secret }}">/{{ account }}.md</a> - Markdown</li>
          <li><a href="/{{ account }}.ics?secret={{ secret }}">/{{ account }}.ics</a> - ICS Calendar</li>
        </ul>
      </li>
    {%- endfor %}
    </ul>
    """
)


app = Flask(__name__)
settings = Settings.from_env()
cache = WorkoutCache(settings.cache_ttl_seconds)
capture_workouts: CaptureFn = TrainingPeaksCapture(settings)


def split_format(account_ref: str) -> tuple[str, str]:
    for suffix, output_format in FORMAT_SUFFIXES.items():
        if account_ref.endswith(suffix) and len(account_ref) > len(suffix):
            return account_ref[: -len(suffix)], output_format
    return account_ref, FORMAT_JSON


def _error_response(output_format: str, message: str, status_code: int):
    if output_format == FORMAT_CALENDAR:
        return Response(f"Error: {message}", status=status_code, mimetype="text/plain")
    if output_format == FORMAT_MARKDOWN:
        return Response(f"# Error\n\n{message}", status=status_code, mimetype="text/markdown")
    return {"error": message}, status_code


@app.before_request
def require_secret():
    if request.path in UNGATED_PATHS:
        return None
    if not settings.api_secret or request.args.get("secret") != settings.api_secret:
        return Response("Not found", status=404, mimetype="text/plain")
    return None


@app.get("/health")
def health() -> tuple[dict, int]:
    return (
        {
            "status": "ok",
            "time_utc": datetime.now(timezone.utc).isoformat(),
            "accounts": len(settings.accounts),
        },
        200,
    )


@app.get("/")
def index() -> str:
    return INDEX_TEMPLATE.render(
        accounts=settings.account_keys(),
        secret=request.args.get("secret") or "",
    )


@app.get("/<string:account_ref>")
def workouts(account_ref: str):
    account, output_format = split_format(account_ref)
    try:
        result, age_seconds = load_result(settings, account, cache=cache, capture=capture_workouts)
    except UnknownAccountError as exc:
        return _error_response(output_format, str(exc), 404)
    except Exception as exc:
        logger.exception("Failed to load workouts for %s", account)
        return _error_response(output_format, str(exc), 500)

    if output_format == FORMAT_CALENDAR:
        body = render_calendar(result, calendar_timezone=settings.calendar_timezone)
        return Response(body, mimetype="text/calendar")
    if output_format == FORMAT_MARKDOWN:
        return Response(render_markdown(result), mimetype="text/markdown")
    return structured_payload(result, age_seconds), 200


def main() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    try:
        settings.validate()
    except ValueError as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc

    logger.info("TrainingPeaks API running at http://localhost:%s", settings.api_port)
    logger.info("Available users: %s", ", ".join(settings.account_keys()))
    app.run(host="0.0.0.0", port=settings.api_port, threaded=True)


if __name__ == "__main__":
    main()
