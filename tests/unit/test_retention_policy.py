import datetime as dt

import pytest

from artifact_uploader.core.contracts import RetentionConfig
from artifact_uploader.core.retention import (
    DEFAULT_RETENTION_DAYS,
    RetentionPolicy,
    expiration_of,
)

START = dt.datetime(2024, 2, 20, 12, 30, tzinfo=dt.UTC)


@pytest.mark.parametrize("days", [None, 0, -5])
def test_unset_or_non_positive_days_use_default(days: int | None) -> None:
    assert expiration_of(START, days) == START + dt.timedelta(days=DEFAULT_RETENTION_DAYS)


def test_explicit_days_are_used_as_is() -> None:
    assert expiration_of(START, 30) == START + dt.timedelta(days=30)
    assert expiration_of(START, 4000) == START + dt.timedelta(days=4000)


def test_policy_uses_injected_clock() -> None:
    policy = RetentionPolicy(clock=lambda: START)
    assert policy.expiration_for(RetentionConfig(days=7)) == dt.datetime(
        2024, 2, 27, 12, 30, tzinfo=dt.UTC
    )
    assert policy.expiration_for(RetentionConfig()) == START + dt.timedelta(days=90)
