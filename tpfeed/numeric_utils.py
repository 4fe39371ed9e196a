from __future__ import annotations

import math
from typing import Any


def as_float(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return None
        return float(value)
    return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Print a plan length the way the upstream JSON spells it (``400`` not ``400.0``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def hours_to_hms(value: Any) -> str | None:
    hours = as_float(value)
    if hours is None or hours <= 0:
        return None
    total = round_half_up(hours * 3600)
    h = total // 3600
    minutes = (total % 3600) // 60
    seconds = total % 60
    return f"{h}:{minutes:02d}:{seconds:02d}"


def meters_to_distance(value: Any) -> str | None:
    meters = as_float(value)
    if meters is None:
        return None
    if meters >= 1000:
        tenths = round_half_up(meters / 100)
        return f"{tenths // 10}.{tenths % 10} km"
    return f"{round_half_up(meters)} m"


def tss_label(value: Any) -> str | None:
    tss = as_float(value)
    if tss is None:
        return None
    return f"{round_half_up(tss)} TSS"
