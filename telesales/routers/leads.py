"""
Lead scoring router.

GET  /leads/{lead_id}/score              — score breakdown (read-only)
POST /leads/{lead_id}/score/recalculate  — score and persist leads.lead_score
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from telesales.db.base import get_db
from telesales.schemas.lead import LeadScoreBreakdownResponse, LeadScoreResponse
from telesales.services.lead_scoring import LeadScoreBreakdown, get_score_label
from telesales.services.lead_service import recalculate_lead_score, score_lead_by_id


router = APIRouter(prefix="/leads", tags=["leads"])

_NOW = Query(
    default=None,
    description="Scoring instant (ISO-8601). Defaults to the current UTC time.",
    examples=["2026-02-21T18:30:00Z"],
)


def _score_to_response(lead_id: int, b: LeadScoreBreakdown, persisted: bool) -> LeadScoreResponse:
    return LeadScoreResponse(
        lead_id=lead_id,
        label=get_score_label(b.total_score),
        persisted=persisted,
        breakdown=LeadScoreBreakdownResponse(
            base_score=b.base_score,
            interaction_bonus=b.interaction_bonus,
            interest_bonus=b.interest_bonus,
            callback_bonus=b.callback_bonus,
            recency_bonus=b.recency_bonus,
            deal_value_bonus=b.deal_value_bonus,
            close_date_bonus=b.close_date_bonus,
            penalties=b.penalties,
            total_score=b.total_score,
        ),
    )


@router.get(
    "/{lead_id}/score",
    response_model=LeadScoreResponse,
    summary="Lead score breakdown",
)
def read_lead_score(lead_id: int, now: Optional[datetime] = _NOW, db: Session = Depends(get_db)):
    """
    ### Labels
    | Score | Label |
    |---|---|
    | 80–100 | Hot |
    | 60–79  | Warm |
    | 40–59  | Lukewarm |
    | 20–39  | Cool |
    | 0–19   | Cold |
    """
    return _score_to_response(lead_id, score_lead_by_id(db, lead_id, now), persisted=False)


@router.post(
    "/{lead_id}/score/recalculate",
    response_model=LeadScoreResponse,
    summary="Recalculate and store the lead score",
)
def recalculate_score(lead_id: int, now: Optional[datetime] = _NOW, db: Session = Depends(get_db)):
    return _score_to_response(lead_id, recalculate_lead_score(db, lead_id, now), persisted=True)
