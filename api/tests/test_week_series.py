"""Series assembly and contributor-week reduction."""

import pytest

from gitsignal.models.series import ContributorActivity, ContributorWeek
from gitsignal.services.week_buckets import SECONDS_PER_WEEK
from gitsignal.services.week_series import WeekCounts, assemble_series, reduce_contributor_weeks

W = SECONDS_PER_WEEK


def _activity(contributor_id, weeks):
    return ContributorActivity(
        contributor_id=contributor_id,
        weeks=[ContributorWeek(week=w, commit_count=c) for w, c in weeks],
    )


def test_week_counts_iterates_in_week_order():
    counts = WeekCounts()
    counts.add(5 * W)
    counts.add(1 * W, 3)
    counts.add(3 * W)
    counts.add(1 * W)
    assert counts.weeks() == [1 * W, 3 * W, 5 * W]
    assert list(counts.items()) == [(1 * W, 4), (3 * W, 1), (5 * W, 1)]
    assert counts.first() == 1 * W
    assert counts.last() == 5 * W
    assert len(counts) == 3
    assert 3 * W in counts
    assert counts.get(2 * W) == 0


def test_week_counts_rejects_negative():
    with pytest.raises(ValueError):
        WeekCounts().add(W, -1)


def test_week_counts_from_timestamps_buckets_each_event():
    counts = WeekCounts.from_timestamps([10 * W + 5, 10 * W + 99, 12 * W + 1])
    assert list(counts.items()) == [(10 * W, 2), (12 * W, 1)]
    assert WeekCounts().first() is None


def test_assemble_zero_fills_gaps_and_is_dense():
    counts = WeekCounts.from_timestamps([100 * W + 1, 100 * W + 2, 103 * W + 7])
    series = assemble_series(counts, 100 * W, 105 * W)
    assert [p.week for p in series] == [w * W for w in range(100, 106)]
    assert [p.value for p in series] == [2, 0, 0, 1, 0, 0]
    for a, b in zip(series, series[1:]):
        assert b.week - a.week == W
    assert all(p.label for p in series)


def test_assemble_single_bucket_range():
    counts = WeekCounts.from_timestamps([7 * W])
    series = assemble_series(counts, 7 * W, 7 * W)
    assert [(p.week, p.value) for p in series] == [(7 * W, 1)]


def test_assemble_horizon_range_with_no_data_is_emitted_in_full():
    series = assemble_series(WeekCounts(), 10 * W, 62 * W)
    assert len(series) == 53
    assert all(p.value == 0 for p in series)


def test_assemble_inverted_range_is_empty():
    counts = WeekCounts.from_timestamps([9 * W])
    assert assemble_series(counts, 10 * W, 9 * W) == []


def test_assemble_rejects_misaligned_range():
    with pytest.raises(ValueError):
        assemble_series(WeekCounts(), 10 * W, 11 * W + 3)


def test_assemble_on_anchored_grid():
    anchor = 3 * 86400 + 17
    counts = WeekCounts.from_timestamps([anchor + 5, anchor + 2 * W + 5], anchor=anchor)
    series = assemble_series(counts, anchor, anchor + 2 * W)
    assert [p.value for p in series] == [1, 0, 1]
    assert all(p.week % W == anchor % W for p in series)


def test_reducer_counts_only_active_contributors():
    week = 1000 * W
    series = reduce_contributor_weeks([_activity("a", [(week, 3)]), _activity("b", [(week, 0)])])
    assert [(p.week, p.value) for p in series] == [(week, 1)]


def test_reducer_keeps_weeks_where_nobody_committed():
    series = reduce_contributor_weeks(
        [
            _activity("a", [(1 * W, 2), (2 * W, 0), (3 * W, 1)]),
            _activity("b", [(1 * W, 5), (2 * W, 0)]),
        ]
    )
    assert [(p.week, p.value) for p in series] == [(1 * W, 2), (2 * W, 0), (3 * W, 1)]


def test_reducer_uses_union_of_keys_in_order():
    series = reduce_contributor_weeks(
        [
            _activity("a", [(5 * W, 1)]),
            _activity("b", [(2 * W, 4)]),
            _activity("c", [(9 * W, 0)]),
        ]
    )
    # Keys come from the data only; gaps between them are not filled.
    assert [p.week for p in series] == [2 * W, 5 * W, 9 * W]
    assert [p.value for p in series] == [1, 1, 0]


def test_reducer_counts_a_contributor_once_per_week():
    series = reduce_contributor_weeks(
        [_activity("a", [(4 * W, 1)]), _activity("a", [(4 * W, 2)]), _activity("b", [(4 * W, 1)])]
    )
    assert [p.value for p in series] == [2]


def test_reducer_empty_input_is_empty_series():
    assert reduce_contributor_weeks([]) == []
    assert reduce_contributor_weeks([_activity("a", [])]) == []
