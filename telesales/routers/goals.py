"""
Goals, goal streaks, milestones and level.

POST /agents/{agent_id}/goals          — set the goal for the current period
POST /agents/{agent_id}/goals/completions — stamp goals that reached their target
GET  /agents/{agent_id}/goal-streaks   — streak per (metric, goal_type)
GET  /agents/{agent_id}/milestones     — earned / upcoming badges + celebrations
GET  /agents/{agent_id}/level          — XP and level tier
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from telesales.core.config import settings
from telesales.core.dates import local_now, utc_now
from telesales.db.base import get_db
from telesales.models.goal import AgentGoal
from telesales.routers._serialize import celebration_to_response, milestone_to_response
from telesales.schemas.goal import (
    AgentLevelResponse,
    EarnedMilestoneResponse,
    GoalCompletionResponse,
    GoalCreateRequest,
    GoalResponse,
    GoalStreakListResponse,
    GoalStreakResponse,
    LevelTierResponse,
    MilestoneSummaryResponse,
    UpcomingMilestoneResponse,
)
from telesales.services.agent_level import LevelTier, compute_agent_level
from telesales.services.goal_service import (
    count_completed_goals,
    create_goal,
    derive_agent_streaks,
    mark_completed_goals,
)
from telesales.services.login_streak_service import get_login_streak_state
from telesales.services.milestone_evaluator import evaluate
from telesales.services.milestone_notifier import NotificationSettings, award_new_milestones

router = APIRouter(prefix="/agents", tags=["goals"])

_NOW = Query(
    default=None,
    description="Evaluation instant (ISO-8601). Defaults to the current UTC time.",
    examples=["2026-02-21T18:30:00Z"],
)


def _today(now: Optional[datetime]):
    return local_now(now or utc_now(), settings.streak_tz).date()


def _goal_to_response(g: AgentGoal) -> GoalResponse:
    return GoalResponse(
        id=g.id,
        agent_id=g.agent_id,
        goal_type=g.goal_type,
        metric=g.metric,
        target_value=g.target_value,
        start_date=str(g.start_date),
        end_date=str(g.end_date),
        is_active=g.is_active,
    )


def _tier_to_response(t: Optional[LevelTier]) -> Optional[LevelTierResponse]:
    if t is None:
        return None
    return LevelTierResponse(level=t.level, name=t.name, title=t.title, min_xp=t.min_xp, icon=t.icon)


@router.post(
    "/{agent_id}/goals",
    response_model=GoalResponse,
    status_code=201,
    summary="Set the agent's goal for the current week or month",
)
def set_goal(
    agent_id: int,
    body: GoalCreateRequest,
    now: Optional[datetime] = _NOW,
    db: Session = Depends(get_db),
):
    """Replaces any active goal for the same (goal_type, metric)."""
    goal = create_goal(
        db=db,
        agent_id=agent_id,
        goal_type=body.goal_type,
        metric=body.metric,
        target_value=body.target_value,
        today=_today(now),
    )
    return _goal_to_response(goal)


@router.post(
    "/{agent_id}/goals/completions",
    response_model=GoalCompletionResponse,
    summary="Stamp completed_at on goals that reached their target",
)
def complete_goals(agent_id: int, now: Optional[datetime] = _NOW, db: Session = Depends(get_db)):
    """
    Goal streaks count only stamped goals. Run after activity is recorded, or
    on a schedule; repeated calls stamp nothing new.
    """
    as_of = _today(now)
    marked = mark_completed_goals(db, agent_id, as_of)
    return GoalCompletionResponse(as_of=str(as_of), marked=marked)


@router.get(
    "/{agent_id}/goal-streaks",
    response_model=GoalStreakListResponse,
    summary="Consecutive completed goal periods per metric and goal type",
)
def goal_streaks(agent_id: int, now: Optional[datetime] = _NOW, db: Session = Depends(get_db)):
    as_of = _today(now)
    streaks = derive_agent_streaks(db, agent_id, as_of)
    return GoalStreakListResponse(
        as_of=str(as_of),
        items=[
            GoalStreakResponse(
                metric=s.metric,
                goal_type=s.goal_type,
                current_streak=s.current_streak,
                longest_streak=s.longest_streak,
            )
            for s in streaks
        ],
    )


@router.get(
    "/{agent_id}/milestones",
    response_model=MilestoneSummaryResponse,
    summary="Streak milestone badges, next milestones and new celebrations",
)
def milestones(
    agent_id: int,
    now: Optional[datetime] = _NOW,
    sound: Optional[bool] = Query(default=None, description="Override the celebration-sound setting."),
    db: Session = Depends(get_db),
):
    """
    Badges are awarded once: `celebrations` lists only thresholds crossed since
    the previous call and is empty when nothing changed.
    """
    summary = evaluate(derive_agent_streaks(db, agent_id, _today(now)))
    celebrations = award_new_milestones(
        db, agent_id, summary, NotificationSettings.from_settings(settings, sound)
    )
    return MilestoneSummaryResponse(
        earned=[
            EarnedMilestoneResponse(
                milestone=milestone_to_response(e.milestone),
                metric=e.metric,
                goal_type=e.goal_type,
                current_streak=e.current_streak,
            )
            for e in summary.earned
        ],
        upcoming=[
            UpcomingMilestoneResponse(
                milestone=milestone_to_response(u.milestone),
                metric=u.metric,
                goal_type=u.goal_type,
                current_streak=u.current_streak,
                remaining=u.remaining,
                progress_percentage=u.progress_percentage,
            )
            for u in summary.upcoming
        ],
        total_badges=summary.total_badges,
        legendary_count=summary.legendary_count,
        epic_count=summary.epic_count,
        celebrations=[celebration_to_response(c) for c in celebrations],
    )


@router.get(
    "/{agent_id}/level",
    response_model=AgentLevelResponse,
    summary="Agent XP and level tier",
)
def agent_level(agent_id: int, now: Optional[datetime] = _NOW, db: Session = Depends(get_db)):
    streaks = derive_agent_streaks(db, agent_id, _today(now))
    login = get_login_streak_state(db, agent_id)
    level = compute_agent_level(count_completed_goals(db, agent_id), streaks, login.current_streak)
    return AgentLevelResponse(
        current=_tier_to_response(level.current),
        next=_tier_to_response(level.next),
        total_xp=level.total_xp,
        xp_into_level=level.xp_into_level,
        xp_to_next_level=level.xp_to_next_level,
        progress_percentage=level.progress_percentage,
    )
