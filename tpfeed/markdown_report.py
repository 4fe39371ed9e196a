from __future__ import annotations

from collections import defaultdict

from .models import CanonicalWorkout, WorkoutResult

NO_DATE_HEADING = "No Date"
PLANNED_MARKER = "⏳"
COMPLETED_MARKER = "✅"


def display_account(account: str) -> str:
    return account[:1].upper() + account[1:]


def numbered_steps(steps: list[str]) -> str:
    return "\n\n".join(f"{index}. {step}" for index, step in enumerate(steps, start=1))


def _render_workout(workout: CanonicalWorkout) -> str:
    status = PLANNED_MARKER if workout.is_planned else COMPLETED_MARKER
    md = f"### {status} {workout.title}\n\n"
    if workout.duration:
        md += f"- **Duration:** {workout.duration}\n"
    if workout.distance:
        md += f"- **Distance:** {workout.distance}\n"
    if workout.tss:
        md += f"- **TSS:** {workout.tss}\n"
    if workout.description:
        md += f"\n{workout.description}\n"
    if workout.steps:
        md += f"\n**Steps:**\n\n{numbered_steps(workout.steps)}\n"
    return md + "\n"


def render_markdown(result: WorkoutResult) -> str:
    md = f"# TrainingPeaks Workouts - {display_account(result.account)}\n\n"
    md += f"_Last updated: {result.captured_at_iso}_\n"
    md += (
        f"_Total: {result.total_count} workouts "
        f"({result.planned_count} planned, {result.completed_count} completed)_\n\n"
    )

    by_date: dict[str, list[CanonicalWorkout]] = defaultdict(list)
    for workout in result.workouts:
        by_date[workout.date or NO_DATE_HEADING].append(workout)

    for day in sorted(by_date):
        md += f"## {day}\n\n"
        for workout in by_date[day]:
            md += _render_workout(workout)
        md += "---\n\n"
    return md
