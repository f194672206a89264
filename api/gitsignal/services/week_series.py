"""Dense weekly series assembly and contributor-week reduction."""

from __future__ import annotations

from bisect import insort
from typing import Iterable, Iterator

from gitsignal.models.series import ContributorActivity, TimeSeriesPoint
from gitsignal.services.week_buckets import SECONDS_PER_WEEK, bucket_of, week_label


class WeekCounts:
    """Week -> count map that always iterates in ascending week order."""

    def __init__(self) -> None:
        self._counts: dict[int, int] = {}
        self._weeks: list[int] = []

    @classmethod
    def from_timestamps(cls, timestamps: Iterable[int], anchor: int = 0) -> "WeekCounts":
        counts = cls()
        for ts in timestamps:
            counts.add(bucket_of(ts, anchor))
        return counts

    def add(self, week: int, n: int = 1) -> None:
        if n < 0:
            raise ValueError(f"week counts cannot decrease (week={week}, n={n})")
        if week not in self._counts:
            self._counts[week] = 0
            insort(self._weeks, week)
        self._counts[week] += n

    def get(self, week: int) -> int:
        return self._counts.get(week, 0)

    def weeks(self) -> list[int]:
        return list(self._weeks)

    def items(self) -> Iterator[tuple[int, int]]:
        for week in self._weeks:
            yield week, self._counts[week]

    def first(self) -> int | None:
        return self._weeks[0] if self._weeks else None

    def last(self) -> int | None:
        return self._weeks[-1] if self._weeks else None

    def __len__(self) -> int:
        return len(self._weeks)

    def __contains__(self, week: object) -> bool:
        return week in self._counts

    def __repr__(self) -> str:
        return f"WeekCounts({dict(self.items())!r})"


def point(week: int, value: int) -> TimeSeriesPoint:
    return TimeSeriesPoint(week=week, value=value, label=week_label(week))


def assemble_series(counts: WeekCounts, first_week: int, last_week: int) -> list[TimeSeriesPoint]:
    """Every bucket from first_week to last_week inclusive, zero where counts has no entry.

    Both ends must lie on the same week grid. An inverted range yields an empty series.
    """
    if (last_week - first_week) % SECONDS_PER_WEEK != 0:
        raise ValueError(f"first_week={first_week} and last_week={last_week} are not on the same week grid")
    if first_week > last_week:
        return []
    return [point(week, counts.get(week)) for week in range(first_week, last_week + 1, SECONDS_PER_WEEK)]


def reduce_contributor_weeks(activities: Iterable[ContributorActivity]) -> list[TimeSeriesPoint]:
    """Distinct active contributors per week over the union of every contributor's weeks.

    A week listed only with zero commits is still emitted (value 0).
    """
    active: dict[int, set[str]] = {}
    for activity in activities:
        for entry in activity.weeks:
            members = active.setdefault(entry.week, set())
            if entry.commit_count > 0:
                members.add(activity.contributor_id)
    return [point(week, len(active[week])) for week in sorted(active)]
