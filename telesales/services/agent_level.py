"""
Agent level: XP accumulated from goals, goal streaks and the login streak,
mapped onto ten level tiers.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from telesales.core.errors import InvalidInputError
from telesales.services.goal_streak import GoalStreak
from telesales.services.milestone_catalog import GoalType


@dataclass(frozen=True)
class LevelTier:
    level: int
    name: str
    title: str
    min_xp: int
    icon: str


@dataclass(frozen=True)
class AgentLevel:
    current: LevelTier
    next: Optional[LevelTier]
    total_xp: int
    xp_into_level: int
    xp_to_next_level: int
    progress_percentage: int


XP_GOAL_COMPLETED = 50
XP_PER_WEEKLY_STREAK = 25
XP_PER_MONTHLY_STREAK = 100
XP_PER_LONGEST_STREAK = 10

_LOGIN_XP_PER_DAY = 10
# (streak at least, extra XP per streak day)
_LOGIN_XP_TIERS = ((7, 2), (30, 3), (100, 5))

LEVEL_TIERS: tuple[LevelTier, ...] = (
    LevelTier(1,  "Rookie",      "Sales Rookie",      0,    "🌱"),
    LevelTier(2,  "Apprentice",  "Sales Apprentice",  100,  "📈"),
    LevelTier(3,  "Associate",   "Sales Associate",   300,  "⭐"),
    LevelTier(4,  "Professional", "Sales Professional", 600, "🏆"),
    LevelTier(5,  "Expert",      "Sales Expert",      1000, "💎"),
    LevelTier(6,  "Master",      "Sales Master",      1500, "🔥"),
    LevelTier(7,  "Champion",    "Sales Champion",    2200, "👑"),
    LevelTier(8,  "Legend",      "Sales Legend",      3000, "🌟"),
    LevelTier(9,  "Elite",       "Sales Elite",       4000, "💫"),
    LevelTier(10, "Grandmaster", "Sales Grandmaster", 5500, "🎖️"),
)


def login_streak_xp(login_streak: int) -> int:
    if login_streak <= 0:
        return 0
    xp = login_streak * _LOGIN_XP_PER_DAY
    for threshold, per_day in _LOGIN_XP_TIERS:
        if login_streak >= threshold:
            xp += login_streak * per_day
    return xp


def total_xp(completed_goals: int, streaks: Iterable[GoalStreak], login_streak: int = 0) -> int:
    if completed_goals < 0 or login_streak < 0:
        raise InvalidInputError("XP inputs must be non-negative.")
    xp = completed_goals * XP_GOAL_COMPLETED
    for streak in streaks:
        per_period = XP_PER_WEEKLY_STREAK if streak.goal_type == GoalType.WEEKLY else XP_PER_MONTHLY_STREAK
        xp += streak.current_streak * per_period
        xp += streak.longest_streak * XP_PER_LONGEST_STREAK
    return xp + login_streak_xp(login_streak)


def level_for_xp(xp: int) -> AgentLevel:
    index = 0
    for i, tier in enumerate(LEVEL_TIERS):
        if xp >= tier.min_xp:
            index = i
    current = LEVEL_TIERS[index]
    nxt = LEVEL_TIERS[index + 1] if index + 1 < len(LEVEL_TIERS) else None

    into = xp - current.min_xp
    if nxt is None:
        return AgentLevel(current, None, xp, into, 0, 100)
    span = nxt.min_xp - current.min_xp
    return AgentLevel(
        current=current,
        next=nxt,
        total_xp=xp,
        xp_into_level=into,
        xp_to_next_level=nxt.min_xp - xp,
        progress_percentage=min(100, round(into / span * 100)),
    )


def compute_agent_level(
    completed_goals: int,
    streaks: Iterable[GoalStreak],
    login_streak: int = 0,
) -> AgentLevel:
    return level_for_xp(total_xp(completed_goals, streaks, login_streak))
