"""
Login streak router.

POST /agents/{agent_id}/login-streak/credit    — credit today's login
GET  /agents/{agent_id}/login-streak           — stored streak counters
GET  /agents/{agent_id}/login-streak/reminder  — streak-loss urgency
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from telesales.core.config import settings
from telesales.core.dates import utc_now
from telesales.db.base import get_db
from telesales.routers._serialize import celebration_to_response, milestone_to_response
from telesales.schemas.streak import (
    LoginCreditResponse,
    LoginStreakResponse,
    NextMilestoneResponse,
    StreakReminderResponse,
)
from telesales.services.login_streak_service import (
    LoginCreditResult,
    credit_login,
    get_login_streak_state,
)
from telesales.services.milestone_notifier import NotificationSettings, celebrate_login
from telesales.services.reminder import classify_urgency
from telesales.services.streak_ledger import LoginStreakState

router = APIRouter(prefix="/agents", tags=["login-streak"])

_NOW = Query(
    default=None,
    description="Evaluation instant (ISO-8601). Defaults to the current UTC time.",
    examples=["2026-02-21T18:30:00Z"],
)


def _state_to_response(state: LoginStreakState) -> LoginStreakResponse:
    return LoginStreakResponse(
        current_streak=state.current_streak,
        longest_streak=state.longest_streak,
        last_login_date=str(state.last_login_date) if state.last_login_date else None,
    )


def _credit_to_response(result: LoginCreditResult, sound: Optional[bool]) -> LoginCreditResponse:
    nxt = result.next_milestone
    celebration = celebrate_login(result, NotificationSettings.from_settings(settings, sound))
    return LoginCreditResponse(
        streak=_state_to_response(result.state),
        is_new_day=result.is_new_day,
        bonus_xp=result.bonus_xp,
        rarity=result.rarity,
        milestone=milestone_to_response(result.milestone) if result.milestone else None,
        next_milestone=(
            NextMilestoneResponse(milestone=milestone_to_response(nxt.milestone), remaining=nxt.remaining)
            if nxt else None
        ),
        celebration=celebration_to_response(celebration),
    )


@router.post(
    "/{agent_id}/login-streak/credit",
    response_model=LoginCreditResponse,
    summary="Credit today's login to the agent's streak",
)
def credit_login_streak(
    agent_id: int,
    now: Optional[datetime] = _NOW,
    sound: Optional[bool] = Query(default=None, description="Override the celebration-sound setting."),
    db: Session = Depends(get_db),
):
    """
    Called on every successful login. Only the first call of a calendar day
    (in `STREAK_TIMEZONE`) changes the streak; later calls return the stored
    state with `is_new_day = false`.
    """
    result = credit_login(db=db, agent_id=agent_id, now=now)
    return _credit_to_response(result, sound)


@router.get(
    "/{agent_id}/login-streak",
    response_model=LoginStreakResponse,
    summary="Current and longest login streak",
)
def read_login_streak(agent_id: int, db: Session = Depends(get_db)):
    return _state_to_response(get_login_streak_state(db, agent_id))


@router.get(
    "/{agent_id}/login-streak/reminder",
    response_model=StreakReminderResponse,
    summary="How urgently the agent must log in to keep the streak",
)
def login_streak_reminder(
    agent_id: int,
    now: Optional[datetime] = _NOW,
    db: Session = Depends(get_db),
):
    """
    ### Urgency tiers (time left until local midnight)
    | Level | Remaining |
    |---|---|
    | `low`      | 6h or more |
    | `medium`   | 2h – 6h |
    | `high`     | 30min – 2h |
    | `critical` | under 30min |

    `should_show` is true only while the streak is at risk: the agent has a
    streak, has not logged in today, and less than 12h remain until midnight.
    """
    state = get_login_streak_state(db, agent_id)
    reminder = classify_urgency(
        state.current_streak, state.last_login_date, now or utc_now(), settings.streak_tz
    )
    return StreakReminderResponse(
        level=reminder.level,
        hours_remaining=reminder.hours_remaining,
        minutes_remaining=reminder.minutes_remaining,
        has_logged_in_today=reminder.has_logged_in_today,
        should_show=reminder.should_show,
        current_streak=state.current_streak,
    )
