from __future__ import annotations

import logging
from datetime import datetime, timezone
from collections.abc import Iterable, Mapping
from typing import Any

from .models import CanonicalWorkout, RawActivityRecord, WorkoutResult
from .normalizer import normalize


logger = logging.getLogger(__name__)

RawPayload = RawActivityRecord | Mapping[str, Any]


def _backfill_details(existing: CanonicalWorkout, incoming: CanonicalWorkout) -> None:
    if existing.description is None and incoming.description is not None:
        existing.description = incoming.description
    if existing.steps is None and incoming.steps is not None:
        existing.steps = list(incoming.steps)


def _merge_into(existing: CanonicalWorkout, incoming: CanonicalWorkout) -> None:
    """Apply one later variant of the same workout to the entry already seen.

    When a completed variant upgrades a planned entry, a missing description
    or step list is also taken from the completed variant, so both arrival
    orders end in the same record.
    """
    if not incoming.is_planned and existing.is_planned:
        # Completed numbers win; the plan's description and steps stay.
        existing.is_planned = False
        existing.duration = incoming.duration
        existing.distance = incoming.distance
        existing.tss = incoming.tss
        _backfill_details(existing, incoming)
    elif incoming.is_planned and not existing.is_planned:
        _backfill_details(existing, incoming)
    # Same status: first seen wins.


def _sort_key(workout: CanonicalWorkout) -> tuple[int, str]:
    if workout.date is None:
        return (1, "")
    return (0, workout.date)


def merge_activities(raws: Iterable[RawPayload]) -> list[CanonicalWorkout]:
    """Fold raw activity payloads into one canonical workout per ``title|date``.

    A completed variant upgrades an earlier planned one (status, duration,
    distance, TSS) while the plan's description and steps are kept. A planned
    variant arriving after the completed one only fills in a missing
    description or step list. Duplicates with the same status are dropped.
    The result is ordered by date with undated workouts last.
    """
    seen: dict[str, CanonicalWorkout] = {}
    skipped = 0
    for raw in raws:
        if not isinstance(raw, (RawActivityRecord, Mapping)):
            skipped += 1
            continue
        incoming = normalize(raw)
        existing = seen.get(incoming.key)
        if existing is None:
            seen[incoming.key] = incoming
            continue
        _merge_into(existing, incoming)

    if skipped:
        logger.warning("Skipped %s non-object activity payload(s).", skipped)
    return sorted(seen.values(), key=_sort_key)


def build_result(
    account: str,
    raws: Iterable[RawPayload],
    *,
    captured_at: datetime | None = None,
) -> WorkoutResult:
    workouts = merge_activities(raws)
    result = WorkoutResult(
        account=account,
        workouts=tuple(workouts),
        captured_at=captured_at or datetime.now(timezone.utc),
    )
    logger.info(
        "Merged %s unique workout(s) for %s (%s planned, %s completed).",
        result.total_count,
        account,
        result.planned_count,
        result.completed_count,
    )
    return result
