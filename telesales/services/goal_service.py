"""
Goal persistence and measurement: feeds the Goal Streak Deriver.

Measured value per metric over [start_date, end_date] (calendar days in the
streak timezone, inclusive):
  calls       number of call_feedback rows
  interested  call_feedback rows with status "interested"
  leads       leads created
  conversion  round(interested / calls * 100), 0 when there were no calls

Public API
----------
create_goal(db, agent_id, goal_type, metric, target_value, today) -> AgentGoal
get_goal_history(db, agent_id, metric, goal_type, tz=None)        -> list[GoalRecord]
mark_completed_goals(db, agent_id, as_of, tz=None)                -> int
derive_agent_streaks(db, agent_id, as_of, tz=None)                -> list[GoalStreak]
count_completed_goals(db, agent_id)                               -> int

derive_agent_streaks only reads. Stamping completed_at is a separate write
(mark_completed_goals), limited to goals that closed within COMPLETION_LOOKBACK.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from telesales.core.config import settings
from telesales.core.errors import AgentNotFoundError, InvalidInputError
from telesales.models.activity import CallFeedback
from telesales.models.agent_profile import AgentProfile
from telesales.models.goal import AgentGoal
from telesales.models.lead import Lead
from telesales.services._db import collaborator
from telesales.services.goal_streak import (
    GoalMetric,
    GoalRecord,
    GoalStreak,
    derive_streak,
    period_bounds,
)
from telesales.services.lead_scoring import FeedbackStatus
from telesales.services.milestone_catalog import GoalType

logger = logging.getLogger(__name__)

# goals that closed longer ago than this are final and never re-measured
COMPLETION_LOOKBACK = timedelta(days=35)


def _window(start: date, end: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open instant range covering the calendar days start..end in `tz`, as UTC."""
    lo = datetime.combine(start, time.min, tzinfo=tz)
    hi = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz)
    return lo.astimezone(timezone.utc), hi.astimezone(timezone.utc)


def _ensure_agent(db: Session, agent_id: int) -> None:
    with collaborator(db, "agent_profiles"):
        exists = db.get(AgentProfile, agent_id) is not None
    if not exists:
        raise AgentNotFoundError(agent_id)


# ---------------------------------------------------------------------------
# Measurement
# ---------------------------------------------------------------------------

def measure_goal_value(
    db: Session,
    agent_id: int,
    metric: str,
    start: date,
    end: date,
    tz: Optional[tzinfo] = None,
) -> float:
    lo, hi = _window(start, end, tz or settings.streak_tz)
    with collaborator(db, "performance data"):
        feedback = db.query(func.count(CallFeedback.id)).filter(
            CallFeedback.agent_id == agent_id,
            CallFeedback.call_timestamp >= lo,
            CallFeedback.call_timestamp < hi,
        )
        if metric == GoalMetric.LEADS:
            return float(
                db.query(func.count(Lead.id))
                .filter(Lead.agent_id == agent_id, Lead.created_at >= lo, Lead.created_at < hi)
                .scalar()
                or 0
            )
        calls = feedback.scalar() or 0
        if metric == GoalMetric.CALLS:
            return float(calls)
        interested = (
            feedback.filter(CallFeedback.feedback_status == FeedbackStatus.INTERESTED).scalar() or 0
        )
        if metric == GoalMetric.INTERESTED:
            return float(interested)
        if metric == GoalMetric.CONVERSION:
            return float(round(interested / calls * 100)) if calls else 0.0
    raise InvalidInputError(f"Unknown metric {metric!r}.", field="metric", value=metric)


def _to_record(goal: AgentGoal, actual: float) -> GoalRecord:
    return GoalRecord(
        id=goal.id,
        agent_id=goal.agent_id,
        goal_type=goal.goal_type,
        metric=goal.metric,
        target_value=float(goal.target_value),
        start_date=goal.start_date,
        end_date=goal.end_date,
        is_active=goal.is_active,
        completed_at=goal.completed_at,
        actual_value=actual,
    )


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def create_goal(
    db: Session,
    agent_id: int,
    goal_type: str,
    metric: str,
    target_value: float,
    today: date,
) -> AgentGoal:
    """
    Create the goal for the current week/month. The active predecessor for the
    same (goal_type, metric) is deactivated in the same transaction.
    """
    if goal_type not in GoalType.ALL:
        raise InvalidInputError(f"Unknown goal type {goal_type!r}.", field="goal_type", value=goal_type)
    if metric not in GoalMetric.ALL:
        raise InvalidInputError(f"Unknown metric {metric!r}.", field="metric", value=metric)
    if target_value <= 0:
        raise InvalidInputError("target_value must be positive.", field="target_value", value=target_value)
    _ensure_agent(db, agent_id)

    start, end = period_bounds(goal_type, today)
    with collaborator(db, "agent_goals"):
        (
            db.query(AgentGoal)
            .filter(
                AgentGoal.agent_id == agent_id,
                AgentGoal.goal_type == goal_type,
                AgentGoal.metric == metric,
                AgentGoal.is_active.is_(True),
            )
            .update({AgentGoal.is_active: False}, synchronize_session=False)
        )
        goal = AgentGoal(
            agent_id=agent_id,
            goal_type=goal_type,
            metric=metric,
            target_value=target_value,
            start_date=start,
            end_date=end,
            is_active=True,
        )
        db.add(goal)
        db.commit()
        db.refresh(goal)
    logger.info("Agent %s set %s %s goal %s for %s..%s", agent_id, goal_type, metric, target_value, start, end)
    return goal


def get_goal_history(
    db: Session,
    agent_id: int,
    metric: str,
    goal_type: str,
    tz: Optional[tzinfo] = None,
) -> list[GoalRecord]:
    """All goal records for the pair, newest period first, with measured values."""
    with collaborator(db, "agent_goals"):
        goals = (
            db.query(AgentGoal)
            .filter(
                AgentGoal.agent_id == agent_id,
                AgentGoal.metric == metric,
                AgentGoal.goal_type == goal_type,
            )
            .order_by(AgentGoal.end_date.desc(), AgentGoal.id.desc())
            .all()
        )
    return [
        _to_record(g, measure_goal_value(db, agent_id, g.metric, g.start_date, g.end_date, tz))
        for g in goals
    ]


def mark_completed_goals(
    db: Session,
    agent_id: int,
    as_of: date,
    tz: Optional[tzinfo] = None,
) -> int:
    """
    Stamp completed_at on goals whose measured value has reached the target.
    Only goals ending on or after `as_of - COMPLETION_LOOKBACK` are measured.
    """
    _ensure_agent(db, agent_id)
    with collaborator(db, "agent_goals"):
        pending = (
            db.query(AgentGoal)
            .filter(
                AgentGoal.agent_id == agent_id,
                AgentGoal.completed_at.is_(None),
                AgentGoal.start_date <= as_of,
                AgentGoal.end_date >= as_of - COMPLETION_LOOKBACK,
            )
            .all()
        )
    stamped = 0
    for goal in pending:
        actual = measure_goal_value(db, agent_id, goal.metric, goal.start_date, goal.end_date, tz)
        if actual >= goal.target_value:
            goal.completed_at = min(as_of, goal.end_date)
            stamped += 1
    if stamped:
        with collaborator(db, "agent_goals"):
            db.commit()
        logger.info("Marked %s goal(s) completed for agent %s", stamped, agent_id)
    return stamped


def derive_agent_streaks(
    db: Session,
    agent_id: int,
    as_of: date,
    tz: Optional[tzinfo] = None,
) -> list[GoalStreak]:
    """GoalStreak for every (metric, goal_type) pair, in a stable order. Read-only."""
    _ensure_agent(db, agent_id)
    return [
        derive_streak(get_goal_history(db, agent_id, metric, goal_type, tz), as_of,
                      metric=metric, goal_type=goal_type)
        for goal_type in GoalType.ALL
        for metric in GoalMetric.ALL
    ]


def count_completed_goals(db: Session, agent_id: int) -> int:
    with collaborator(db, "agent_goals"):
        return (
            db.query(func.count(AgentGoal.id))
            .filter(AgentGoal.agent_id == agent_id, AgentGoal.completed_at.isnot(None))
            .scalar()
            or 0
        )
