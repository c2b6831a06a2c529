"""
Lead persistence: activity timeline and score recalculation.

The activity timeline merges three sources into LeadActivityEvents:
  - the lead row itself (creation event)
  - call_feedback for the lead's contact (feedback events)
  - contact_history for the contact (note / status_change / whatsapp_sent)
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from telesales.core.dates import DateLike, to_datetime, utc_now
from telesales.core.errors import LeadNotFoundError
from telesales.models.activity import CallFeedback, ContactHistory
from telesales.models.lead import Lead
from telesales.services._db import collaborator
from telesales.services.lead_scoring import (
    ActivityType,
    LeadActivityEvent,
    LeadScoreBreakdown,
    score_lead,
)

logger = logging.getLogger(__name__)

_HISTORY_TYPES = {
    "note": ActivityType.NOTE,
    "status_change": ActivityType.STATUS_CHANGE,
    "whatsapp": ActivityType.WHATSAPP_SENT,
    "whatsapp_sent": ActivityType.WHATSAPP_SENT,
}


def get_lead(db: Session, lead_id: int) -> Lead:
    with collaborator(db, "leads"):
        lead = db.get(Lead, lead_id)
    if lead is None:
        raise LeadNotFoundError(lead_id)
    return lead


def get_lead_activity(db: Session, lead: Lead) -> list[LeadActivityEvent]:
    """Timeline for the lead's contact, newest first."""
    with collaborator(db, "lead activity"):
        feedback = (
            db.query(CallFeedback)
            .filter(CallFeedback.contact_id == lead.contact_id)
            .all()
        )
        history = (
            db.query(ContactHistory)
            .filter(ContactHistory.contact_id == lead.contact_id)
            .all()
        )

    events = [LeadActivityEvent(ActivityType.CREATED, to_datetime(lead.created_at, "created_at"))]
    for f in feedback:
        events.append(LeadActivityEvent(
            event_type=ActivityType.FEEDBACK,
            timestamp=to_datetime(f.call_timestamp, "call_timestamp"),
            feedback_status=f.feedback_status,
            note=f.notes,
        ))
    for h in history:
        kind = _HISTORY_TYPES.get(h.action_type)
        if kind is None:
            logger.debug("Skipping contact_history %s with action_type %r", h.id, h.action_type)
            continue
        events.append(LeadActivityEvent(
            event_type=kind,
            timestamp=to_datetime(h.action_date, "action_date"),
            note=h.notes,
        ))
    events.sort(key=lambda e: e.timestamp, reverse=True)
    return events


def score_lead_by_id(db: Session, lead_id: int, now: Optional[DateLike] = None) -> LeadScoreBreakdown:
    lead = get_lead(db, lead_id)
    return score_lead(
        get_lead_activity(db, lead),
        lead.deal_value,
        lead.expected_close_date,
        now or utc_now(),
    )


def recalculate_lead_score(db: Session, lead_id: int, now: Optional[DateLike] = None) -> LeadScoreBreakdown:
    """Score the lead and persist `leads.lead_score`."""
    breakdown = score_lead_by_id(db, lead_id, now)
    lead = get_lead(db, lead_id)
    with collaborator(db, "leads"):
        lead.lead_score = breakdown.total_score
        db.commit()
    logger.info("Lead %s rescored to %s", lead_id, breakdown.total_score)
    return breakdown
