"""
Streak Ledger: daily login-streak accounting.

Transition table for advance_streak(state, today)
-------------------------------------------------
  last_login_date is None       → current = 1
  last_login_date == today - 1  → current + 1
  last_login_date >= today      → no-op, state returned unchanged
  otherwise (gap of 2+ days)    → current = 1 (reset)

After any crediting branch: longest = max(longest, current) and
last_login_date = today.

Pure functions only. Persistence and the at-most-once-per-day guard live in
login_streak_service.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Optional

from telesales.core.dates import DateLike, to_date
from telesales.core.errors import InvalidInputError


@dataclass(frozen=True)
class LoginStreakState:
    current_streak: int = 0
    longest_streak: int = 0
    last_login_date: Optional[date] = None


# Bonus XP for a newly credited day
_BASE_DAILY_XP = 10
_XP_TIERS = ((7, 5), (30, 10), (100, 25))


def validate_state(state: LoginStreakState) -> LoginStreakState:
    """Reject negative or inconsistent counters and normalise last_login_date to a date."""
    for name in ("current_streak", "longest_streak"):
        value = getattr(state, name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidInputError(f"{name} must be a non-negative integer.", field=name, value=value)
    if state.longest_streak < state.current_streak:
        raise InvalidInputError(
            "longest_streak cannot be below current_streak.",
            field="longest_streak", value=state.longest_streak,
        )
    last = to_date(state.last_login_date, "last_login_date")
    if last is not state.last_login_date:
        state = replace(state, last_login_date=last)
    return state


def is_credited_on(state: LoginStreakState, today: date) -> bool:
    """True if the streak was already credited on `today` (or a later day)."""
    return state.last_login_date is not None and state.last_login_date >= today


def advance_streak(state: LoginStreakState, today: DateLike) -> LoginStreakState:
    """Return the login-streak state after a login on `today`."""
    state = validate_state(state)
    day = to_date(today, "today")
    if day is None:
        raise InvalidInputError("today is required.", field="today")

    last = state.last_login_date
    if is_credited_on(state, day):
        return state

    if last is not None and last == day - timedelta(days=1):
        current = state.current_streak + 1
    else:
        current = 1

    return LoginStreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_login_date=day,
    )


def streak_bonus_xp(current_streak: int) -> int:
    """XP granted for the day that brought the streak to `current_streak`."""
    if current_streak <= 0:
        return 0
    xp = _BASE_DAILY_XP
    for threshold, bonus in _XP_TIERS:
        if current_streak >= threshold:
            xp += bonus
    return xp
