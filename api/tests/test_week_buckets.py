"""Week bucketing: epoch grid, anchored grids, horizons and labels."""

from datetime import datetime, timedelta, timezone

import pytest

from gitsignal.services.week_buckets import (
    SECONDS_PER_WEEK,
    bucket_of,
    current_week,
    horizon_weeks,
    iso_utc,
    recency_horizon,
    to_timestamp,
    week_label,
)


def test_seconds_per_week():
    assert SECONDS_PER_WEEK == 604800


@pytest.mark.parametrize("ts", [0, 1, 604799, 604800, 1_700_000_000, 1_772_625_600])
def test_epoch_bucket_is_truncation(ts):
    assert bucket_of(ts) == ts - (ts % SECONDS_PER_WEEK)
    assert bucket_of(ts) % SECONDS_PER_WEEK == 0
    assert 0 <= ts - bucket_of(ts) < SECONDS_PER_WEEK


@pytest.mark.parametrize("anchor", [0, 3 * 86400, 1_699_747_200, 1_700_000_123])
@pytest.mark.parametrize("ts", [1_699_000_000, 1_700_000_123, 1_712_345_678])
def test_anchored_bucket_keeps_anchor_phase(ts, anchor):
    week = bucket_of(ts, anchor)
    assert week % SECONDS_PER_WEEK == anchor % SECONDS_PER_WEEK
    assert week <= ts < week + SECONDS_PER_WEEK


def test_anchor_itself_starts_a_bucket():
    anchor = 1_700_000_123
    assert bucket_of(anchor, anchor) == anchor
    assert bucket_of(anchor - 1, anchor) == anchor - SECONDS_PER_WEEK


def test_to_timestamp_treats_naive_as_utc():
    aware = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
    naive = datetime(2026, 3, 4, 12, 0)
    assert to_timestamp(aware) == to_timestamp(naive) == int(aware.timestamp())


def test_current_week_matches_bucket_of_now():
    now = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
    assert current_week(now) == bucket_of(to_timestamp(now))


def test_recency_horizon_is_exactly_52_weeks():
    now = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
    assert recency_horizon(now) == now - timedelta(weeks=52)
    assert recency_horizon(now, weeks=4) == now - timedelta(weeks=4)


def test_horizon_weeks_from_env(monkeypatch):
    monkeypatch.setenv("GITSIGNAL_HORIZON_WEEKS", "26")
    assert horizon_weeks() == 26
    monkeypatch.setenv("GITSIGNAL_HORIZON_WEEKS", "not-a-number")
    assert horizon_weeks() == 52
    monkeypatch.setenv("GITSIGNAL_HORIZON_WEEKS", "0")
    assert horizon_weeks() == 1


def test_iso_utc_and_week_label():
    assert iso_utc(datetime(2026, 3, 4, 12, 0, 5, tzinfo=timezone.utc)) == "2026-03-04T12:00:05Z"
    # 1970-01-01 is a Thursday; the epoch grid starts every bucket on a Thursday.
    assert week_label(0) == "Jan 1"
    assert week_label(SECONDS_PER_WEEK) == "Jan 8"
