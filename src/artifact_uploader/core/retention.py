"""Expiration timestamps derived from the configured retention window."""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable

from .contracts import RetentionConfig

DEFAULT_RETENTION_DAYS = 90


def resolve_retention_days(days: int | None) -> int:
    """Return `days`, or the default when it is unset or non-positive."""
    if days is None or days <= 0:
        return DEFAULT_RETENTION_DAYS
    return days


def expiration_of(start_time: dt.datetime, days: int | None = None) -> dt.datetime:
    """Absolute expiration instant for objects uploaded at `start_time`."""
    return start_time + dt.timedelta(days=resolve_retention_days(days))


class RetentionPolicy:
    """Computes the single expiration instant shared by all objects of a run."""

    def __init__(self, *, clock: Callable[[], dt.datetime] | None = None) -> None:
        self._clock = clock or (lambda: dt.datetime.now(tz=dt.UTC))

    def expiration_for(self, config: RetentionConfig) -> dt.datetime:
        return expiration_of(self._clock(), config.days)


__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "RetentionPolicy",
    "expiration_of",
    "resolve_retention_days",
]
