from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from .cache import WorkoutCache
from .capture import CaptureFn
from .config import Settings
from .merge import build_result
from .models import WorkoutResult
from .numeric_utils import round_half_up


logger = logging.getLogger(__name__)


class UnknownAccountError(LookupError):
    def __init__(self, account: str):
        super().__init__(f"Unknown account: {account}")
        self.account = account


def load_result(
    settings: Settings,
    account: str,
    *,
    cache: WorkoutCache,
    capture: CaptureFn,
    now: datetime | None = None,
) -> tuple[WorkoutResult, float | None]:
    """Return the account's result and its cache age in seconds (``None`` when freshly captured).

    A failed capture propagates and leaves any existing cache entry untouched.
    """
    credentials = settings.accounts.get(account)
    if credentials is None:
        raise UnknownAccountError(account)

    current = now or datetime.now(timezone.utc)
    entry = cache.lookup(account)
    if entry is not None and cache.is_fresh(entry, now=current):
        logger.info("Returning cached workouts for %s", account)
        return entry.data, entry.age_seconds(current)

    logger.info("Fetching fresh data for %s...", account)
    raws = capture(account, credentials)
    result = build_result(account, raws, captured_at=datetime.now(timezone.utc))
    cache.put(account, result, at=current)
    return result, None


def get_workouts(
    settings: Settings,
    account: str,
    *,
    cache: WorkoutCache,
    capture: CaptureFn,
    now: datetime | None = None,
) -> dict[str, Any]:
    result, age_seconds = load_result(settings, account, cache=cache, capture=capture, now=now)
    return structured_payload(result, age_seconds)


def structured_payload(result: WorkoutResult, age_seconds: float | None) -> dict[str, Any]:
    payload = result.to_payload()
    if age_seconds is None:
        payload["cached"] = False
        return payload
    payload["cached"] = True
    payload["cacheAge"] = f"{round_half_up(age_seconds)} seconds"
    return payload
