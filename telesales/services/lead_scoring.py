"""
Lead Score Engine.

Turns a lead's interaction history into a bounded 0–100 score.

Composition (additive, then clamped to [0, 100])
-----------------------------------------------
  base            20 for any lead that exists
  interactions    +5 per interaction, capped at +25 (creation is not one)
  interest        +20 when the latest feedback is "interested"
  callbacks       +5 per callback, capped at +15
  recency         +15 today, +12 within 3 days, +8 within 7, +4 within 14
  deal value      +4 under 10k, +7 under 50k, +10 from 50k up
  close date      +5 when due within 30 days, +3 within 90 days
  penalties       -15 latest feedback not_interested / wrong_number
                  -5 per repeated negative signal (after the first), cap -20
                  -2 per not_answered, cap -10
                  -15 stale: last interaction more than 30 days ago

Deterministic: the only clock is the `now` argument.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from telesales.core.dates import DateLike, to_date, to_datetime
from telesales.core.errors import InvalidInputError


class ActivityType:
    FEEDBACK      = "feedback"
    CREATED       = "created"
    STATUS_CHANGE = "status_change"
    NOTE          = "note"
    WHATSAPP_SENT = "whatsapp_sent"

    ALL = (FEEDBACK, CREATED, STATUS_CHANGE, NOTE, WHATSAPP_SENT)


class FeedbackStatus:
    INTERESTED     = "interested"
    NOT_INTERESTED = "not_interested"
    NOT_ANSWERED   = "not_answered"
    CALLBACK       = "callback"
    WRONG_NUMBER   = "wrong_number"

    ALL = (INTERESTED, NOT_INTERESTED, NOT_ANSWERED, CALLBACK, WRONG_NUMBER)
    NEGATIVE = (NOT_INTERESTED, WRONG_NUMBER)


@dataclass(frozen=True)
class LeadActivityEvent:
    event_type: str
    timestamp: datetime
    feedback_status: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class LeadScoreBreakdown:
    base_score: int
    interaction_bonus: int
    interest_bonus: int
    callback_bonus: int
    recency_bonus: int
    deal_value_bonus: int
    close_date_bonus: int
    penalties: int
    total_score: int


class ScoringWeights:
    BASE_SCORE              = 20
    PER_INTERACTION         = 5
    MAX_INTERACTION_BONUS   = 25
    LATEST_INTERESTED       = 20
    PER_CALLBACK            = 5
    MAX_CALLBACK_BONUS      = 15
    LATEST_NEGATIVE_PENALTY = -15
    REPEAT_NEGATIVE_PENALTY = -5
    MAX_REPEAT_PENALTY      = -20
    NOT_ANSWERED_PENALTY    = -2
    MAX_NOT_ANSWERED        = -10
    STALE_PENALTY           = -15
    STALE_AFTER_DAYS        = 30


# (max days since last interaction, bonus)
_RECENCY_STEPS = ((0, 15), (3, 12), (7, 8), (14, 4))
# (deal value strictly below, bonus); anything larger gets _DEAL_VALUE_TOP
_DEAL_VALUE_BUCKETS = ((10_000, 4), (50_000, 7))
_DEAL_VALUE_TOP = 10
# (max days until expected close, bonus)
_CLOSE_DATE_WINDOWS = ((30, 5), (90, 3))

# upper bound (exclusive) of each label, checked in order
_SCORE_LABELS = ((20, "Cold"), (40, "Cool"), (60, "Lukewarm"), (80, "Warm"), (101, "Hot"))


def _clean_event(event: LeadActivityEvent) -> LeadActivityEvent:
    if event.event_type not in ActivityType.ALL:
        raise InvalidInputError(f"Unknown activity type {event.event_type!r}.",
                                field="event_type", value=event.event_type)
    if event.event_type == ActivityType.FEEDBACK and event.feedback_status not in FeedbackStatus.ALL:
        raise InvalidInputError(f"Unknown feedback status {event.feedback_status!r}.",
                                field="feedback_status", value=event.feedback_status)
    ts = to_datetime(event.timestamp, "timestamp")
    if ts is None:
        raise InvalidInputError("Activity events need a timestamp.", field="timestamp")
    if ts is event.timestamp:
        return event
    return LeadActivityEvent(event.event_type, ts, event.feedback_status, event.note)


def _check_amount(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("deal_value must be numeric.", field="deal_value", value=value)
    if math.isnan(number) or math.isinf(number):
        raise InvalidInputError("deal_value must be finite.", field="deal_value", value=value)
    return number


def _recency_bonus(days: Optional[int]) -> int:
    if days is None:
        return 0
    for max_days, bonus in _RECENCY_STEPS:
        if days <= max_days:
            return bonus
    return 0


def _deal_value_bonus(value: Optional[float]) -> int:
    if value is None or value <= 0:
        return 0
    for ceiling, bonus in _DEAL_VALUE_BUCKETS:
        if value < ceiling:
            return bonus
    return _DEAL_VALUE_TOP


def _close_date_bonus(close: Optional[date], today: date) -> int:
    if close is None:
        return 0
    days_until = (close - today).days
    if days_until < 0:
        return 0
    for max_days, bonus in _CLOSE_DATE_WINDOWS:
        if days_until <= max_days:
            return bonus
    return 0


def score_lead(
    events: Optional[Iterable[LeadActivityEvent]],
    deal_value: Optional[float],
    expected_close_date: Optional[DateLike],
    now: DateLike,
) -> LeadScoreBreakdown:
    w = ScoringWeights
    current = to_datetime(now, "now")
    if current is None:
        raise InvalidInputError("now is required.", field="now")
    amount = _check_amount(deal_value)
    close = to_date(expected_close_date, "expected_close_date")

    # chronological; sorted() is stable so same-instant events keep input order
    timeline = sorted((_clean_event(e) for e in events or []), key=lambda e: e.timestamp)
    interactions = [e for e in timeline if e.event_type != ActivityType.CREATED]
    feedback = [e for e in timeline if e.event_type == ActivityType.FEEDBACK]
    statuses = [e.feedback_status for e in feedback]

    interaction_bonus = min(len(interactions) * w.PER_INTERACTION, w.MAX_INTERACTION_BONUS)
    callback_bonus = min(statuses.count(FeedbackStatus.CALLBACK) * w.PER_CALLBACK, w.MAX_CALLBACK_BONUS)

    penalties = 0
    interest_bonus = 0
    latest = statuses[-1] if statuses else None
    if latest == FeedbackStatus.INTERESTED:
        interest_bonus = w.LATEST_INTERESTED
    elif latest in FeedbackStatus.NEGATIVE:
        penalties += w.LATEST_NEGATIVE_PENALTY

    negatives = sum(1 for s in statuses if s in FeedbackStatus.NEGATIVE)
    if negatives > 1:
        penalties += max((negatives - 1) * w.REPEAT_NEGATIVE_PENALTY, w.MAX_REPEAT_PENALTY)
    penalties += max(statuses.count(FeedbackStatus.NOT_ANSWERED) * w.NOT_ANSWERED_PENALTY,
                     w.MAX_NOT_ANSWERED)

    days_since: Optional[int] = None
    if interactions:
        elapsed = current - interactions[-1].timestamp
        days_since = max(0, elapsed // timedelta(days=1))
        if days_since > w.STALE_AFTER_DAYS:
            penalties += w.STALE_PENALTY

    recency_bonus = _recency_bonus(days_since)
    deal_value_bonus = _deal_value_bonus(amount)
    close_date_bonus = _close_date_bonus(close, current.date())

    raw = (
        w.BASE_SCORE + interaction_bonus + interest_bonus + callback_bonus
        + recency_bonus + deal_value_bonus + close_date_bonus + penalties
    )
    return LeadScoreBreakdown(
        base_score=w.BASE_SCORE,
        interaction_bonus=interaction_bonus,
        interest_bonus=interest_bonus,
        callback_bonus=callback_bonus,
        recency_bonus=recency_bonus,
        deal_value_bonus=deal_value_bonus,
        close_date_bonus=close_date_bonus,
        penalties=penalties,
        total_score=max(0, min(100, raw)),
    )


def get_score_label(score: float) -> str:
    """Hot / Warm / Lukewarm / Cool / Cold for a score in [0, 100]."""
    if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score) \
            or score < 0 or score > 100:
        raise InvalidInputError("score must be a number in [0, 100].", field="score", value=score)
    for ceiling, label in _SCORE_LABELS:
        if score < ceiling:
            return label
    return "Hot"
