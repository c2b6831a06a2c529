"""
Milestone Evaluator: goal streaks in, badges out.

One earned entry (the highest threshold met) and at most one upcoming entry
(the next threshold) per (metric, goal_type) pair. Lower tiers already
passed are never listed separately.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from telesales.services.goal_streak import GoalStreak
from telesales.services.milestone_catalog import (
    MilestoneDefinition,
    Rarity,
    highest_met,
    next_unmet,
)


@dataclass(frozen=True)
class EarnedMilestone:
    milestone: MilestoneDefinition
    metric: str
    goal_type: str
    current_streak: int

    @property
    def key(self) -> str:
        """Stable identity used by the notifier to tell new badges from seen ones."""
        return f"{self.milestone.id}-{self.metric}-{self.goal_type}"


@dataclass(frozen=True)
class UpcomingMilestone:
    milestone: MilestoneDefinition
    metric: str
    goal_type: str
    current_streak: int
    remaining: int

    @property
    def progress_percentage(self) -> int:
        return min(100, round(self.current_streak / self.milestone.threshold * 100))


@dataclass
class MilestoneSummary:
    earned: list[EarnedMilestone] = field(default_factory=list)
    upcoming: list[UpcomingMilestone] = field(default_factory=list)
    total_badges: int = 0
    legendary_count: int = 0
    epic_count: int = 0
    by_rarity: dict[str, int] = field(default_factory=dict)


def evaluate(streaks: Optional[Iterable[GoalStreak]]) -> MilestoneSummary:
    summary = MilestoneSummary(by_rarity={r: 0 for r in Rarity.ORDER})
    seen: set[tuple[str, str]] = set()

    for streak in streaks or []:
        pair = (streak.metric, streak.goal_type)
        if pair in seen:
            continue
        seen.add(pair)

        reached = highest_met(streak.current_streak, streak.goal_type)
        if reached is not None:
            summary.earned.append(EarnedMilestone(
                milestone=reached,
                metric=streak.metric,
                goal_type=streak.goal_type,
                current_streak=streak.current_streak,
            ))
            summary.by_rarity[reached.rarity] += 1

        upcoming = next_unmet(streak.current_streak, streak.goal_type)
        if upcoming is not None:
            summary.upcoming.append(UpcomingMilestone(
                milestone=upcoming.milestone,
                metric=streak.metric,
                goal_type=streak.goal_type,
                current_streak=streak.current_streak,
                remaining=upcoming.remaining,
            ))

    summary.total_badges = len(summary.earned)
    summary.legendary_count = summary.by_rarity[Rarity.LEGENDARY]
    summary.epic_count = summary.by_rarity[Rarity.EPIC]
    return summary
