"""
Goal Streak Deriver.

A goal streak is the number of consecutive, most recent *closed* goal periods
in which the agent met the target, with no missing period in between.

Rules
-----
  - A period is open when start_date <= as_of <= end_date. Open periods are
    skipped: they neither count nor break the streak.
  - Periods starting after as_of are ignored.
  - Walking closed periods newest-first, counting stops at the first
    incomplete period or the first gap.
  - Adjacency: newer.start_date == older.end_date + 1 day. Weekly periods are
    ISO weeks (Monday–Sunday); monthly periods are calendar months.
  - The newest closed period must be the one right before the period that
    contains as_of, otherwise the streak has already lapsed.
  - A period is complete iff completed_at is set AND the measured value met
    target_value. Measurement is the caller's job (see goal_service).

Pure functions; O(len(history)).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from telesales.core.dates import DateLike, to_date
from telesales.core.errors import InvalidInputError
from telesales.services.milestone_catalog import GoalType


class GoalMetric:
    CALLS      = "calls"
    INTERESTED = "interested"
    LEADS      = "leads"
    CONVERSION = "conversion"

    ALL = (CALLS, INTERESTED, LEADS, CONVERSION)


@dataclass(frozen=True)
class GoalRecord:
    goal_type: str
    metric: str
    target_value: float
    start_date: date
    end_date: date
    is_active: bool = True
    completed_at: Optional[date] = None
    actual_value: Optional[float] = None
    id: Optional[int] = None
    agent_id: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return (
            self.completed_at is not None
            and self.actual_value is not None
            and self.actual_value >= self.target_value
        )


@dataclass(frozen=True)
class GoalStreak:
    metric: str
    goal_type: str
    current_streak: int
    longest_streak: int = 0


def period_bounds(goal_type: str, day: date) -> tuple[date, date]:
    """(start, end) of the weekly or monthly period containing `day`."""
    if goal_type == GoalType.WEEKLY:
        start = day - timedelta(days=day.weekday())
        return start, start + timedelta(days=6)
    if goal_type == GoalType.MONTHLY:
        start = day.replace(day=1)
        nxt = (start + timedelta(days=32)).replace(day=1)
        return start, nxt - timedelta(days=1)
    raise InvalidInputError(f"Unknown goal type {goal_type!r}.", field="goal_type", value=goal_type)


def _normalise(record: GoalRecord) -> GoalRecord:
    if record.goal_type not in GoalType.ALL:
        raise InvalidInputError(f"Unknown goal type {record.goal_type!r}.", field="goal_type",
                                value=record.goal_type)
    if record.metric not in GoalMetric.ALL:
        raise InvalidInputError(f"Unknown metric {record.metric!r}.", field="metric", value=record.metric)
    for name in ("target_value", "actual_value"):
        value = getattr(record, name)
        if value is not None and (not isinstance(value, (int, float)) or math.isnan(value) or math.isinf(value)):
            raise InvalidInputError(f"{name} must be a finite number.", field=name, value=value)

    start = to_date(record.start_date, "start_date")
    end = to_date(record.end_date, "end_date")
    if start is None or end is None:
        raise InvalidInputError("Goal periods need both start_date and end_date.", field="start_date")
    if end < start:
        raise InvalidInputError("end_date precedes start_date.", field="end_date", value=end)
    completed = to_date(record.completed_at, "completed_at")

    return GoalRecord(
        goal_type=record.goal_type,
        metric=record.metric,
        target_value=record.target_value,
        start_date=start,
        end_date=end,
        is_active=record.is_active,
        completed_at=completed,
        actual_value=record.actual_value,
        id=record.id,
        agent_id=record.agent_id,
    )


def _one_per_period(records: Iterable[GoalRecord]) -> list[GoalRecord]:
    """Keep a single record per period: the active one, else the newest id."""
    chosen: dict[tuple[date, date], GoalRecord] = {}
    for rec in records:
        key = (rec.start_date, rec.end_date)
        current = chosen.get(key)
        if current is None or (rec.is_active, rec.id or 0) > (current.is_active, current.id or 0):
            chosen[key] = rec
    return list(chosen.values())


def _adjacent(older: GoalRecord, newer: GoalRecord) -> bool:
    return newer.start_date == older.end_date + timedelta(days=1)


def _longest_run(closed_oldest_first: list[GoalRecord]) -> int:
    best = run = 0
    prev: Optional[GoalRecord] = None
    for rec in closed_oldest_first:
        if not rec.is_complete:
            run = 0
        elif prev is not None and run > 0 and _adjacent(prev, rec):
            run += 1
        else:
            run = 1
        best = max(best, run)
        prev = rec
    return best


def derive_streak(
    history: Optional[Iterable[GoalRecord]],
    as_of: DateLike,
    metric: Optional[str] = None,
    goal_type: Optional[str] = None,
) -> GoalStreak:
    """
    Derive the GoalStreak for one (agent, metric, goal_type) history.
    `metric`/`goal_type` label the result when the history is empty.
    """
    day = to_date(as_of, "as_of")
    if day is None:
        raise InvalidInputError("as_of is required.", field="as_of")

    records = [_normalise(r) for r in (history or [])]
    metric = metric or (records[0].metric if records else GoalMetric.CALLS)
    goal_type = goal_type or (records[0].goal_type if records else GoalType.WEEKLY)

    records = _one_per_period(
        r for r in records if r.metric == metric and r.goal_type == goal_type
    )
    if not records:
        return GoalStreak(metric=metric, goal_type=goal_type, current_streak=0, longest_streak=0)

    open_periods = [r for r in records if r.start_date <= day <= r.end_date]
    closed = sorted((r for r in records if r.end_date < day), key=lambda r: r.end_date, reverse=True)

    current_start = open_periods[0].start_date if open_periods else period_bounds(goal_type, day)[0]
    expected_end = current_start - timedelta(days=1)

    count = 0
    newer: Optional[GoalRecord] = None
    for rec in closed:
        if newer is None:
            if rec.end_date != expected_end:
                break
        elif not _adjacent(rec, newer):
            break
        if not rec.is_complete:
            break
        count += 1
        newer = rec

    longest = max(count, _longest_run(list(reversed(closed))))
    return GoalStreak(metric=metric, goal_type=goal_type, current_streak=count, longest_streak=longest)
