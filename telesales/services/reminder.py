"""
Reminder Urgency Classifier.

How long until the login streak is lost (next local midnight), and how loudly
the UI should say so. Dismissal is caller-held session state and does not
enter here.

Tiers (remaining time until midnight):
  >= 6h          low
  [2h, 6h)       medium
  [30min, 2h)    high
  < 30min        critical

The reminder is shown only while the streak is at risk: the agent has a
streak, has not logged in today, and less than 12h remain.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from telesales.core.dates import DateLike, local_now, to_date
from telesales.core.errors import InvalidInputError


class UrgencyLevel:
    LOW      = "low"
    MEDIUM   = "medium"
    HIGH     = "high"
    CRITICAL = "critical"


# (minimum remaining, level), checked top-down
_TIERS: tuple[tuple[timedelta, str], ...] = (
    (timedelta(hours=6),    UrgencyLevel.LOW),
    (timedelta(hours=2),    UrgencyLevel.MEDIUM),
    (timedelta(minutes=30), UrgencyLevel.HIGH),
    (timedelta(0),          UrgencyLevel.CRITICAL),
)

AT_RISK_WINDOW = timedelta(hours=12)


@dataclass(frozen=True)
class StreakReminder:
    level: str
    hours_remaining: int
    minutes_remaining: int
    time_remaining: timedelta
    has_logged_in_today: bool
    should_show: bool


def _level_for(remaining: timedelta) -> str:
    for floor, level in _TIERS:
        if remaining >= floor:
            return level
    return UrgencyLevel.CRITICAL


def classify_urgency(
    current_streak: int,
    last_login_date: Optional[DateLike],
    now: DateLike,
    tz: tzinfo = timezone.utc,
) -> StreakReminder:
    if isinstance(current_streak, bool) or not isinstance(current_streak, int) or current_streak < 0:
        raise InvalidInputError(
            "current_streak must be a non-negative integer.",
            field="current_streak", value=current_streak,
        )
    local = local_now(now, tz)
    today: date = local.date()
    last = to_date(last_login_date, "last_login_date")

    # wall-clock difference; DST shifts move the deadline with the clock
    midnight = datetime.combine(today + timedelta(days=1), time.min)
    remaining = midnight - local.replace(tzinfo=None)
    hours, rest = divmod(remaining, timedelta(hours=1))
    minutes = rest // timedelta(minutes=1)

    has_logged_in_today = last is not None and last >= today
    # a streak last credited before yesterday is already gone
    lapsed = last is not None and (today - last).days > 1

    return StreakReminder(
        level=_level_for(remaining),
        hours_remaining=hours,
        minutes_remaining=minutes,
        time_remaining=remaining,
        has_logged_in_today=has_logged_in_today,
        should_show=(
            current_streak > 0
            and not has_logged_in_today
            and not lapsed
            and remaining < AT_RISK_WINDOW
        ),
    )
