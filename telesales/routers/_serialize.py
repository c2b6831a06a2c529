"""
Dataclass → response-model helpers shared by the routers.
"""
from __future__ import annotations

from typing import Optional

from telesales.schemas.common import CelebrationResponse, MilestoneResponse
from telesales.services.milestone_catalog import MilestoneDefinition
from telesales.services.milestone_notifier import Celebration


def milestone_to_response(m: MilestoneDefinition) -> MilestoneResponse:
    return MilestoneResponse(
        id=m.id,
        threshold=m.threshold,
        name=m.name,
        icon=m.icon,
        rarity=m.rarity,
        description=m.description,
    )


def celebration_to_response(c: Optional[Celebration]) -> Optional[CelebrationResponse]:
    if c is None:
        return None
    return CelebrationResponse(
        key=c.key,
        milestone=milestone_to_response(c.milestone),
        title=c.title,
        message=c.message,
        duration_seconds=c.duration_seconds,
        play_sound=c.play_sound,
        sound=c.sound,
        metric=c.metric,
        goal_type=c.goal_type,
    )
