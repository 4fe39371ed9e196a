from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from collections.abc import Mapping
from typing import Any

from .dates import utc_iso_millis
from .numeric_utils import as_float

DEFAULT_TITLE = "Workout"

# Canonical field name -> accepted payload keys, upstream TrainingPeaks names first.
RAW_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title": ("title",),
    "day_date": ("workoutDay", "dayDate"),
    "total_time_actual_hours": ("totalTime", "totalTimeActualHours"),
    "total_time_planned_hours": ("totalTimePlanned", "totalTimePlannedHours"),
    "distance_actual_meters": ("distance", "distanceActualMeters"),
    "distance_planned_meters": ("distancePlanned", "distancePlannedMeters"),
    "tss_actual": ("tssActual",),
    "tss_planned": ("tssPlanned",),
    "description": ("description",),
    "coach_notes": ("coachComments", "coachNotes"),
    "structured_plan": ("structure", "structuredPlan"),
}


def _first_present(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value
    return None


def _optional_text(value: Any) -> str | None:
    if not isinstance(value, str) or not value:
        return None
    return value


def _optional_mapping(value: Any) -> Mapping[str, Any] | None:
    return value if isinstance(value, Mapping) else None


@dataclass(frozen=True)
class StepLength:
    value: float | None
    unit: str | None

    @classmethod
    def from_payload(cls, payload: Any) -> "StepLength | None":
        data = _optional_mapping(payload)
        if data is None:
            return None
        unit = data.get("unit")
        return cls(value=as_float(data.get("value")), unit=unit if isinstance(unit, str) else None)


@dataclass(frozen=True)
class PlanStep:
    name: str | None
    intensity: str | None
    length: StepLength | None
    notes: str | None

    @classmethod
    def from_payload(cls, payload: Any) -> "PlanStep | None":
        data = _optional_mapping(payload)
        if data is None:
            return None
        return cls(
            name=_optional_text(data.get("name")),
            intensity=_optional_text(data.get("intensityClass")),
            length=StepLength.from_payload(data.get("length")),
            notes=_optional_text(data.get("notes")),
        )


@dataclass(frozen=True)
class PlanBlock:
    length: StepLength | None
    steps: tuple[PlanStep, ...]

    @classmethod
    def from_payload(cls, payload: Any) -> "PlanBlock | None":
        data = _optional_mapping(payload)
        if data is None:
            return None
        steps_raw = data.get("steps")
        steps: list[PlanStep] = []
        if isinstance(steps_raw, list):
            for item in steps_raw:
                step = PlanStep.from_payload(item)
                if step is not None:
                    steps.append(step)
        return cls(length=StepLength.from_payload(data.get("length")), steps=tuple(steps))

    @property
    def repetitions(self) -> float:
        if self.length is not None and self.length.unit == "repetition" and self.length.value is not None:
            return self.length.value
        return 1


def _plan_blocks(value: Any) -> tuple[PlanBlock, ...] | None:
    # Upstream wraps the block list as {"structure": [...]}; a bare list is accepted too.
    if isinstance(value, Mapping):
        value = value.get("structure")
    if not isinstance(value, list):
        return None
    blocks = [block for block in (PlanBlock.from_payload(item) for item in value) if block is not None]
    return tuple(blocks)


@dataclass(frozen=True)
class RawActivityRecord:
    title: str | None = None
    day_date: str | None = None
    total_time_actual_hours: float | None = None
    total_time_planned_hours: float | None = None
    distance_actual_meters: float | None = None
    distance_planned_meters: float | None = None
    tss_actual: float | None = None
    tss_planned: float | None = None
    description: str | None = None
    coach_notes: str | None = None
    structured_plan: tuple[PlanBlock, ...] | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawActivityRecord":
        def pick(name: str) -> Any:
            return _first_present(payload, RAW_FIELD_ALIASES[name])

        return cls(
            title=_optional_text(pick("title")),
            day_date=_optional_text(pick("day_date")),
            total_time_actual_hours=as_float(pick("total_time_actual_hours")),
            total_time_planned_hours=as_float(pick("total_time_planned_hours")),
            distance_actual_meters=as_float(pick("distance_actual_meters")),
            distance_planned_meters=as_float(pick("distance_planned_meters")),
            tss_actual=as_float(pick("tss_actual")),
            tss_planned=as_float(pick("tss_planned")),
            description=_optional_text(pick("description")),
            coach_notes=_optional_text(pick("coach_notes")),
            structured_plan=_plan_blocks(pick("structured_plan")),
        )

    @property
    def is_completed(self) -> bool:
        return self.total_time_actual_hours is not None and self.total_time_actual_hours > 0


@dataclass
class CanonicalWorkout:
    title: str
    date: str | None = None
    duration: str | None = None
    distance: str | None = None
    tss: str | None = None
    is_planned: bool = True
    description: str | None = None
    steps: list[str] | None = None

    @property
    def key(self) -> str:
        return f"{self.title}|{self.date}"

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "date": self.date,
            "duration": self.duration,
            "distance": self.distance,
            "tss": self.tss,
            "isPlanned": self.is_planned,
            "description": self.description,
            "steps": list(self.steps) if self.steps is not None else None,
        }


@dataclass(frozen=True)
class WorkoutResult:
    account: str
    workouts: tuple[CanonicalWorkout, ...]
    captured_at: datetime
    planned_count: int = field(init=False)
    completed_count: int = field(init=False)

    def __post_init__(self) -> None:
        planned = sum(1 for workout in self.workouts if workout.is_planned)
        object.__setattr__(self, "planned_count", planned)
        object.__setattr__(self, "completed_count", len(self.workouts) - planned)

    @property
    def total_count(self) -> int:
        return len(self.workouts)

    @property
    def captured_at_iso(self) -> str:
        return utc_iso_millis(self.captured_at)

    def to_payload(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "workouts": [workout.to_payload() for workout in self.workouts],
            "totalCount": self.total_count,
            "plannedCount": self.planned_count,
            "completedCount": self.completed_count,
            "capturedAt": self.captured_at_iso,
        }
