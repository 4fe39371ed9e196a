from __future__ import annotations

from typing import Iterable

from .models import PlanBlock, PlanStep, StepLength
from .numeric_utils import format_number

UNIT_ABBREVIATIONS = {
    "meter": "m",
    "second": "s",
    "minute": "min",
}


def format_step_length(length: StepLength | None) -> str:
    if length is None or length.value is None:
        return ""
    value = format_number(length.value)
    abbreviation = UNIT_ABBREVIATIONS.get(length.unit or "")
    if abbreviation is not None:
        return f"{value}{abbreviation}"
    if length.unit:
        return f"{value} {length.unit}"
    return value


def format_step(step: PlanStep, *, prefix: str = "") -> str:
    label = step.name or step.intensity or "Step"
    duration = format_step_length(step.length)
    text = f"{prefix}{label}"
    if duration:
        text += f" ({duration})"
    if step.notes:
        text += f" - {step.notes}"
    return text


def format_steps(blocks: Iterable[PlanBlock] | None) -> list[str] | None:
    """Flatten a structured plan into one readable line per step.

    Steps inside a repeated block carry a ``"<n>x "`` prefix. Returns ``None``
    when the plan is missing or yields no steps.
    """
    if blocks is None:
        return None
    steps: list[str] = []
    for block in blocks:
        reps = block.repetitions
        prefix = f"{format_number(reps)}x " if reps > 1 else ""
        for step in block.steps:
            steps.append(format_step(step, prefix=prefix))
    return steps or None
