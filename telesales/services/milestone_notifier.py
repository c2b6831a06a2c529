"""
Milestone notifier: one-time celebrations for newly crossed thresholds.

Flow for award_new_milestones(db, agent_id, summary, notification_settings)
  1. Load the award ledger keys for the agent.
  2. Diff: earned milestones whose key is not in the ledger are new.
  3. Insert one MilestoneAward per new milestone; commit once.
     The unique constraint is the final guard against a concurrent insert.
  4. Publish `milestone_earned` per award and return the Celebrations.

Re-evaluating an unchanged streak finds nothing new, so nothing fires twice.
Sound is a property of NotificationSettings handed in by the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from telesales.core.config import Settings
from telesales.models.milestone_award import MilestoneAward
from telesales.services._db import collaborator
from telesales.services.events import EventBus, EventType, bus as default_bus
from telesales.services.login_streak_service import LoginCreditResult
from telesales.services.milestone_catalog import MilestoneDefinition, Rarity
from telesales.services.milestone_evaluator import EarnedMilestone, MilestoneSummary

logger = logging.getLogger(__name__)


METRIC_LABELS = {
    "calls": "Calls",
    "interested": "Interested",
    "leads": "Leads",
    "conversion": "Conversion",
}

RARITY_MESSAGES = {
    Rarity.COMMON:    "Nice work!",
    Rarity.UNCOMMON:  "Great achievement!",
    Rarity.RARE:      "Impressive streak!",
    Rarity.EPIC:      "Outstanding dedication!",
    Rarity.LEGENDARY: "LEGENDARY! You are unstoppable!",
}

# seconds a toast stays up, by rarity
TOAST_DURATION = {
    Rarity.COMMON:    6,
    Rarity.UNCOMMON:  6,
    Rarity.RARE:      7,
    Rarity.EPIC:      8,
    Rarity.LEGENDARY: 10,
}


@dataclass(frozen=True)
class NotificationSettings:
    sound_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: Settings, sound: Optional[bool] = None) -> "NotificationSettings":
        return cls(sound_enabled=settings.SOUND_ENABLED if sound is None else sound)


@dataclass(frozen=True)
class Celebration:
    key: str
    milestone: MilestoneDefinition
    title: str
    message: str
    duration_seconds: int
    play_sound: bool
    sound: str
    metric: Optional[str] = None
    goal_type: Optional[str] = None


def _title(milestone: MilestoneDefinition) -> str:
    if milestone.rarity == Rarity.LEGENDARY:
        return f"{milestone.icon} LEGENDARY BADGE UNLOCKED! {milestone.name}"
    if milestone.rarity == Rarity.EPIC:
        return f"{milestone.icon} Epic Badge Earned: {milestone.name}"
    if milestone.rarity == Rarity.RARE:
        return f"{milestone.icon} Rare Badge: {milestone.name}"
    return f"{milestone.icon} {milestone.name} Unlocked!"


def build_celebration(earned: EarnedMilestone, settings: NotificationSettings) -> Celebration:
    m = earned.milestone
    label = METRIC_LABELS.get(earned.metric, earned.metric)
    return Celebration(
        key=earned.key,
        milestone=m,
        title=_title(m),
        message=f"{m.description} ({label} {earned.goal_type}) - {RARITY_MESSAGES[m.rarity]}",
        duration_seconds=TOAST_DURATION[m.rarity],
        play_sound=settings.sound_enabled,
        sound=m.rarity,
        metric=earned.metric,
        goal_type=earned.goal_type,
    )


def celebrate_login(result: LoginCreditResult, settings: NotificationSettings) -> Optional[Celebration]:
    """Celebration for the day a login milestone is hit; None on other days."""
    m = result.milestone
    if not result.is_new_day or m is None:
        return None
    return Celebration(
        key=m.id,
        milestone=m,
        title=f"{m.icon} {m.name} Unlocked!",
        message=f"{result.state.current_streak}-day streak achieved! +{result.bonus_xp} XP bonus!",
        duration_seconds=8,
        play_sound=settings.sound_enabled,
        sound=m.rarity,
    )


def new_milestones(awarded_keys: set[str], earned: Iterable[EarnedMilestone]) -> list[EarnedMilestone]:
    """Earned milestones not yet in the award ledger."""
    return [e for e in earned if e.key not in awarded_keys]


def _ledger_key(award: MilestoneAward) -> str:
    return f"{award.milestone_id}-{award.metric}-{award.goal_type}"


def awarded_keys(db: Session, agent_id: int) -> set[str]:
    with collaborator(db, "milestone_awards"):
        rows = db.query(MilestoneAward).filter(MilestoneAward.agent_id == agent_id).all()
    return {_ledger_key(r) for r in rows}


def award_new_milestones(
    db: Session,
    agent_id: int,
    summary: MilestoneSummary,
    settings: NotificationSettings,
    events: Optional[EventBus] = None,
) -> list[Celebration]:
    fresh = new_milestones(awarded_keys(db, agent_id), summary.earned)
    if not fresh:
        return []

    with collaborator(db, "milestone_awards"):
        for earned in fresh:
            db.add(MilestoneAward(
                agent_id=agent_id,
                milestone_id=earned.milestone.id,
                metric=earned.metric,
                goal_type=earned.goal_type,
                rarity=earned.milestone.rarity,
                streak=earned.current_streak,
            ))
        try:
            db.commit()
        except IntegrityError:
            # a concurrent evaluation recorded them first; it owns the celebration
            db.rollback()
            logger.info("Milestones for agent %s already awarded concurrently", agent_id)
            return []

    bus = events or default_bus
    celebrations = []
    for earned in fresh:
        logger.info("Agent %s earned %s (%s)", agent_id, earned.key, earned.milestone.rarity)
        bus.publish(EventType.MILESTONE_EARNED, {
            "agent_id": agent_id,
            "milestone_id": earned.milestone.id,
            "metric": earned.metric,
            "goal_type": earned.goal_type,
            "rarity": earned.milestone.rarity,
        })
        celebrations.append(build_celebration(earned, settings))
    return celebrations
