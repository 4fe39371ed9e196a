from __future__ import annotations

from datetime import datetime, timezone

from .config import DEFAULT_CALENDAR_TIMEZONE
from .dates import epoch_millis, format_ics_date, format_ics_datetime, next_day, parse_workout_date
from .markdown_report import display_account, numbered_steps
from .models import CanonicalWorkout, WorkoutResult

PRODID = "-//TrainingPeaks Workout Extractor//EN"
FOLD_FIRST_LINE = 74
FOLD_CONTINUATION = 73
CRLF = "\r\n"


def escape_ics(text: str | None) -> str:
    if not text:
        return ""
    return text.replace("\\", "\\\\").replace(";", "\\;").replace(",", "\\,").replace("\n", "\\n")


def fold_ics_line(line: str) -> str:
    """Fold a content line: 74 characters first, then 73 per continuation."""
    if len(line) <= FOLD_FIRST_LINE:
        return line
    parts = [line[:FOLD_FIRST_LINE]]
    remaining = line[FOLD_FIRST_LINE:]
    while remaining:
        parts.append(remaining[:FOLD_CONTINUATION])
        remaining = remaining[FOLD_CONTINUATION:]
    return f"{CRLF} ".join(parts)


def event_description(workout: CanonicalWorkout) -> str:
    description = ""
    if workout.duration:
        description += f"Duration: {workout.duration}\n"
    if workout.distance:
        description += f"Distance: {workout.distance}\n"
    if workout.tss:
        description += f"TSS: {workout.tss}\n"
    if workout.description:
        description += f"\n{workout.description}"
    if workout.steps:
        description += f"\n\nSteps:\n\n{numbered_steps(workout.steps)}"
    return description


def _event_lines(
    result: WorkoutResult,
    workout: CanonicalWorkout,
    index: int,
    *,
    stamp: str,
) -> list[str]:
    event_date = parse_workout_date(workout.date) or result.captured_at.astimezone(timezone.utc).date()
    uid = f"workout-{result.account}-{index}-{epoch_millis(event_date)}@trainingpeaks"
    summary = f"SUMMARY:{escape_ics(workout.title)}{' (Planned)' if workout.is_planned else ''}"
    lines = [
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;VALUE=DATE:{format_ics_date(event_date)}",
        f"DTEND;VALUE=DATE:{format_ics_date(next_day(event_date))}",
        fold_ics_line(summary),
    ]
    description = event_description(workout)
    if description:
        lines.append(fold_ics_line(f"DESCRIPTION:{escape_ics(description)}"))
    lines.append("STATUS:TENTATIVE" if workout.is_planned else "STATUS:CONFIRMED")
    lines.append("END:VEVENT")
    return lines


def render_calendar(
    result: WorkoutResult,
    *,
    calendar_timezone: str = DEFAULT_CALENDAR_TIMEZONE,
    now: datetime | None = None,
) -> str:
    stamp = format_ics_datetime(now or datetime.now(timezone.utc))
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:TrainingPeaks - {display_account(result.account)}",
        f"X-WR-TIMEZONE:{calendar_timezone}",
    ]
    for index, workout in enumerate(result.workouts):
        lines.extend(_event_lines(result, workout, index, stamp=stamp))
    lines.append("END:VCALENDAR")
    return CRLF.join(lines)
