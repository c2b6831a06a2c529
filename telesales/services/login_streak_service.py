"""
Login streak persistence: the stateful side of the Streak Ledger.

credit_login(db, agent_id, now)
  1. Resolve "today" in the streak timezone.
  2. Already credited today → return stored state, is_new_day=False.
  3. Insert LoginCredit(agent_id, today). The unique constraint on
     (agent_id, login_date) rejects a concurrent second credit; that path
     rolls back and returns the state the winner stored.
  4. Write the advanced state plus the last_login instant, commit once.
  5. Publish `login_credited` on the event bus.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from telesales.core.config import settings
from telesales.core.dates import DateLike, local_now, utc_now
from telesales.core.errors import AgentNotFoundError
from telesales.models.agent_profile import AgentProfile
from telesales.models.login_credit import LoginCredit
from telesales.services._db import collaborator
from telesales.services.events import EventBus, EventType, bus as default_bus
from telesales.services.milestone_catalog import (
    MilestoneDefinition,
    NextMilestone,
    exact_login_milestone,
    login_rarity,
    next_login_milestone,
)
from telesales.services.streak_ledger import (
    LoginStreakState,
    advance_streak,
    is_credited_on,
    streak_bonus_xp,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginCreditResult:
    state: LoginStreakState
    is_new_day: bool
    bonus_xp: int
    milestone: Optional[MilestoneDefinition]
    next_milestone: Optional[NextMilestone]
    rarity: str


# ---------------------------------------------------------------------------
# Read / write
# ---------------------------------------------------------------------------

def _profile(db: Session, agent_id: int) -> AgentProfile:
    with collaborator(db, "agent_profiles"):
        profile = db.get(AgentProfile, agent_id)
    if profile is None:
        raise AgentNotFoundError(agent_id)
    return profile


def _state_of(profile: AgentProfile) -> LoginStreakState:
    return LoginStreakState(
        current_streak=profile.login_streak_current or 0,
        longest_streak=profile.login_streak_longest or 0,
        last_login_date=profile.last_login_date,
    )


def get_login_streak_state(db: Session, agent_id: int) -> LoginStreakState:
    return _state_of(_profile(db, agent_id))


def save_login_streak_state(
    db: Session,
    agent_id: int,
    state: LoginStreakState,
    login_at: DateLike | None = None,
) -> None:
    """Stage the new counters on the profile. The caller commits."""
    profile = _profile(db, agent_id)
    profile.login_streak_current = state.current_streak
    profile.login_streak_longest = state.longest_streak
    profile.last_login_date = state.last_login_date
    if login_at is not None:
        profile.last_login = login_at


# ---------------------------------------------------------------------------
# Public: credit a login
# ---------------------------------------------------------------------------

def _result(state: LoginStreakState, is_new_day: bool) -> LoginCreditResult:
    streak = state.current_streak
    return LoginCreditResult(
        state=state,
        is_new_day=is_new_day,
        bonus_xp=streak_bonus_xp(streak) if is_new_day else 0,
        milestone=exact_login_milestone(streak) if is_new_day else None,
        next_milestone=next_login_milestone(streak),
        rarity=login_rarity(streak),
    )


def credit_login(
    db: Session,
    agent_id: int,
    now: Optional[DateLike] = None,
    tz: Optional[tzinfo] = None,
    events: Optional[EventBus] = None,
) -> LoginCreditResult:
    """Credit today's login for `agent_id`. Safe to call on every login."""
    instant = local_now(now or utc_now(), tz or settings.streak_tz)
    today = instant.date()

    state = get_login_streak_state(db, agent_id)
    if is_credited_on(state, today):
        return _result(state, is_new_day=False)

    advanced = advance_streak(state, today)

    with collaborator(db, "login_credits"):
        try:
            db.add(LoginCredit(agent_id=agent_id, login_date=today))
            db.flush()
        except IntegrityError:
            # another login for the same day won the race
            db.rollback()
            logger.info("Login for agent %s on %s already credited", agent_id, today)
            return _result(get_login_streak_state(db, agent_id), is_new_day=False)

        save_login_streak_state(db, agent_id, advanced, login_at=instant)
        db.commit()

    logger.info(
        "Credited login for agent %s on %s: streak %s (longest %s)",
        agent_id, today, advanced.current_streak, advanced.longest_streak,
    )
    result = _result(advanced, is_new_day=True)
    (events or default_bus).publish(EventType.LOGIN_CREDITED, {
        "agent_id": agent_id,
        "login_date": str(today),
        "current_streak": advanced.current_streak,
        "longest_streak": advanced.longest_streak,
        "bonus_xp": result.bonus_xp,
        "milestone_id": result.milestone.id if result.milestone else None,
    })
    return result
