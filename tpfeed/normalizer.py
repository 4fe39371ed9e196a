from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .dates import day_portion
from .models import DEFAULT_TITLE, CanonicalWorkout, RawActivityRecord
from .numeric_utils import hours_to_hms, meters_to_distance, tss_label
from .plan_steps import format_steps


def _first_number(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None


def normalize(raw: RawActivityRecord | Mapping[str, Any]) -> CanonicalWorkout:
    record = raw if isinstance(raw, RawActivityRecord) else RawActivityRecord.from_payload(raw)
    completed = record.is_completed
    hours = record.total_time_actual_hours if completed else record.total_time_planned_hours
    return CanonicalWorkout(
        title=record.title or DEFAULT_TITLE,
        date=day_portion(record.day_date),
        duration=hours_to_hms(hours),
        distance=meters_to_distance(_first_number(record.distance_actual_meters, record.distance_planned_meters)),
        tss=tss_label(_first_number(record.tss_actual, record.tss_planned)),
        is_planned=not completed,
        description=record.description or record.coach_notes,
        steps=format_steps(record.structured_plan),
    )
