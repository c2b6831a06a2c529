"""
Goal, goal-streak, milestone and level schemas.
"""
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from telesales.schemas.common import CelebrationResponse, MilestoneResponse


class GoalCreateRequest(BaseModel):
    goal_type: Literal["weekly", "monthly"]
    metric: Literal["calls", "interested", "leads", "conversion"]
    target_value: float = Field(gt=0)


class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    agent_id: int
    goal_type: str
    metric: str
    target_value: float
    start_date: str
    end_date: str
    is_active: bool


class GoalCompletionResponse(BaseModel):
    as_of: str
    marked: int = Field(description="Goals newly stamped as completed.")


class GoalStreakResponse(BaseModel):
    metric: str
    goal_type: str
    current_streak: int = Field(description="Consecutive most recent closed periods completed.")
    longest_streak: int


class GoalStreakListResponse(BaseModel):
    as_of: str
    items: list[GoalStreakResponse]


class EarnedMilestoneResponse(BaseModel):
    milestone: MilestoneResponse
    metric: str
    goal_type: str
    current_streak: int


class UpcomingMilestoneResponse(BaseModel):
    milestone: MilestoneResponse
    metric: str
    goal_type: str
    current_streak: int
    remaining: int = Field(description="Periods still to go.")
    progress_percentage: int


class MilestoneSummaryResponse(BaseModel):
    earned: list[EarnedMilestoneResponse]
    upcoming: list[UpcomingMilestoneResponse]
    total_badges: int
    legendary_count: int
    epic_count: int
    celebrations: list[CelebrationResponse] = Field(
        description="Badges crossed since the last evaluation. Empty on repeat calls."
    )


class LevelTierResponse(BaseModel):
    level: int
    name: str
    title: str
    min_xp: int
    icon: str


class AgentLevelResponse(BaseModel):
    current: LevelTierResponse
    next: Optional[LevelTierResponse] = None
    total_xp: int
    xp_into_level: int
    xp_to_next_level: int
    progress_percentage: int
