"""
Milestone Catalog: the single source of truth for streak badges.

Goal-streak milestones are counted in periods (weeks or months) and keyed by
goal type. Login-streak milestones are counted in days. Thresholds are
strictly increasing within each list; presentation maps rarity to style and
nothing else.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from telesales.core.errors import InvalidInputError


class Rarity:
    COMMON    = "common"
    UNCOMMON  = "uncommon"
    RARE      = "rare"
    EPIC      = "epic"
    LEGENDARY = "legendary"

    ORDER = (COMMON, UNCOMMON, RARE, EPIC, LEGENDARY)


class GoalType:
    WEEKLY  = "weekly"
    MONTHLY = "monthly"

    ALL = (WEEKLY, MONTHLY)


@dataclass(frozen=True)
class MilestoneDefinition:
    id: str
    threshold: int
    name: str
    icon: str
    rarity: str
    description: str = ""


@dataclass(frozen=True)
class NextMilestone:
    milestone: MilestoneDefinition
    remaining: int


GOAL_MILESTONES: dict[str, tuple[MilestoneDefinition, ...]] = {
    GoalType.WEEKLY: (
        MilestoneDefinition("weekly_2",  2,  "Consistent Starter", "🎯", Rarity.COMMON,
                            "Hit your weekly goal 2 weeks in a row"),
        MilestoneDefinition("weekly_4",  4,  "Monthly Momentum",   "🔥", Rarity.UNCOMMON,
                            "Hit your weekly goal 4 weeks in a row"),
        MilestoneDefinition("weekly_8",  8,  "Two-Month Titan",    "💫", Rarity.RARE,
                            "Hit your weekly goal 8 weeks in a row"),
        MilestoneDefinition("weekly_12", 12, "Quarter Champion",   "🌟", Rarity.EPIC,
                            "Hit your weekly goal 12 weeks in a row"),
        MilestoneDefinition("weekly_26", 26, "Half-Year Hero",     "🏆", Rarity.LEGENDARY,
                            "Hit your weekly goal 26 weeks in a row"),
    ),
    GoalType.MONTHLY: (
        MilestoneDefinition("monthly_2",  2,  "Back-to-Back",      "📅", Rarity.COMMON,
                            "Hit your monthly goal 2 months in a row"),
        MilestoneDefinition("monthly_3",  3,  "Quarter Closer",    "✨", Rarity.UNCOMMON,
                            "Hit your monthly goal 3 months in a row"),
        MilestoneDefinition("monthly_6",  6,  "Half-Year Hustler", "💎", Rarity.RARE,
                            "Hit your monthly goal 6 months in a row"),
        MilestoneDefinition("monthly_9",  9,  "Relentless",        "🌟", Rarity.EPIC,
                            "Hit your monthly goal 9 months in a row"),
        MilestoneDefinition("monthly_12", 12, "Year of Excellence", "👑", Rarity.LEGENDARY,
                            "Hit your monthly goal 12 months in a row"),
    ),
}

LOGIN_MILESTONES: tuple[MilestoneDefinition, ...] = (
    MilestoneDefinition("login_7",   7,   "Week Warrior",   "🗓️", Rarity.RARE,
                        "Logged in 7 days in a row"),
    MilestoneDefinition("login_30",  30,  "Monthly Master", "🌟", Rarity.EPIC,
                        "Logged in 30 days in a row"),
    MilestoneDefinition("login_100", 100, "Century Legend", "👑", Rarity.LEGENDARY,
                        "Logged in 100 days in a row"),
)


def milestones_for(goal_type: str) -> tuple[MilestoneDefinition, ...]:
    try:
        return GOAL_MILESTONES[goal_type]
    except KeyError:
        raise InvalidInputError(f"Unknown goal type {goal_type!r}.", field="goal_type", value=goal_type)


def _check_streak(streak: int) -> None:
    if isinstance(streak, bool) or not isinstance(streak, int) or streak < 0:
        raise InvalidInputError("streak must be a non-negative integer.", field="streak", value=streak)


def _highest(streak: int, catalog: tuple[MilestoneDefinition, ...]) -> Optional[MilestoneDefinition]:
    _check_streak(streak)
    best = None
    for milestone in catalog:
        if milestone.threshold > streak:
            break
        best = milestone
    return best


def _next(streak: int, catalog: tuple[MilestoneDefinition, ...]) -> Optional[NextMilestone]:
    _check_streak(streak)
    for milestone in catalog:
        if milestone.threshold > streak:
            return NextMilestone(milestone=milestone, remaining=milestone.threshold - streak)
    return None


def highest_met(streak: int, goal_type: str) -> Optional[MilestoneDefinition]:
    """Greatest-threshold milestone with threshold <= streak, or None."""
    return _highest(streak, milestones_for(goal_type))


def next_unmet(streak: int, goal_type: str) -> Optional[NextMilestone]:
    """Smallest-threshold milestone with threshold > streak, with periods remaining."""
    return _next(streak, milestones_for(goal_type))


def exact_login_milestone(streak: int) -> Optional[MilestoneDefinition]:
    """The login milestone reached on exactly this day, if any."""
    _check_streak(streak)
    for milestone in LOGIN_MILESTONES:
        if milestone.threshold == streak:
            return milestone
    return None


def next_login_milestone(streak: int) -> Optional[NextMilestone]:
    return _next(streak, LOGIN_MILESTONES)


def login_rarity(streak: int) -> str:
    """Celebration rarity for a login streak that is not on a milestone day."""
    if streak >= 100:
        return Rarity.LEGENDARY
    if streak >= 30:
        return Rarity.EPIC
    if streak >= 7:
        return Rarity.RARE
    if streak >= 3:
        return Rarity.UNCOMMON
    return Rarity.COMMON
