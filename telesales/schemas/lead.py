"""
Lead scoring schemas.

GET  /leads/{id}/score              → LeadScoreResponse
POST /leads/{id}/score/recalculate  → LeadScoreResponse
"""
from pydantic import BaseModel, Field


class LeadScoreBreakdownResponse(BaseModel):
    base_score: int
    interaction_bonus: int
    interest_bonus: int
    callback_bonus: int
    recency_bonus: int
    deal_value_bonus: int
    close_date_bonus: int
    penalties: int = Field(description="Sum of negative contributions (<= 0).")
    total_score: int = Field(description="Clamped to [0, 100].")


class LeadScoreResponse(BaseModel):
    lead_id: int
    label: str = Field(description='"Hot" | "Warm" | "Lukewarm" | "Cool" | "Cold"')
    persisted: bool
    breakdown: LeadScoreBreakdownResponse
