"""
Login streak schemas.

POST /agents/{id}/login-streak/credit   → LoginCreditResponse
GET  /agents/{id}/login-streak          → LoginStreakResponse
GET  /agents/{id}/login-streak/reminder → StreakReminderResponse
"""
from typing import Optional
from pydantic import BaseModel, Field

from telesales.schemas.common import CelebrationResponse, MilestoneResponse


class LoginStreakResponse(BaseModel):
    current_streak: int
    longest_streak: int
    last_login_date: Optional[str] = Field(
        default=None, description="ISO calendar day of the last credited login."
    )


class NextMilestoneResponse(BaseModel):
    milestone: MilestoneResponse
    remaining: int = Field(description="Days still to go.")


class LoginCreditResponse(BaseModel):
    streak: LoginStreakResponse
    is_new_day: bool = Field(description="False when today was already credited.")
    bonus_xp: int
    rarity: str
    milestone: Optional[MilestoneResponse] = Field(
        default=None, description="Login milestone hit exactly today, if any."
    )
    next_milestone: Optional[NextMilestoneResponse] = None
    celebration: Optional[CelebrationResponse] = None


class StreakReminderResponse(BaseModel):
    level: str = Field(description='"low" | "medium" | "high" | "critical"')
    hours_remaining: int
    minutes_remaining: int
    has_logged_in_today: bool
    should_show: bool
    current_streak: int
