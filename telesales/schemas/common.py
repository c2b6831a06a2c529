"""
Shared schema primitives used across the API.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class MilestoneResponse(BaseModel):
    """A catalog entry, as shown on badges."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    threshold: int
    name: str
    icon: str
    rarity: str = Field(description='"common" | "uncommon" | "rare" | "epic" | "legendary"')
    description: str = ""


class CelebrationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    milestone: MilestoneResponse
    title: str
    message: str
    duration_seconds: int
    play_sound: bool
    sound: str = Field(description="Rarity of the sound effect to play.")
    metric: Optional[str] = None
    goal_type: Optional[str] = None
