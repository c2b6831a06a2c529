"""
Tests for the Streak Ledger (pure) and login streak crediting (DB).

Covered scenarios:
  A) first login           — no previous date → streak 1
  B) consecutive day       — yesterday → streak + 1
  C) same day              — no-op, state unchanged
  D) gap                   — 2+ days → reset to 1
  E) longest tracking      — longest >= current after every update
  F) bonus XP tiers
  G) credit_login          — at-most-once per calendar day, timezone aware
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from telesales.core.dates import to_date
from telesales.core.errors import AgentNotFoundError, InvalidInputError
from telesales.models import LoginCredit
from telesales.services.events import EventBus, EventType
from telesales.services.login_streak_service import (
    credit_login,
    get_login_streak_state,
    save_login_streak_state,
)
from telesales.services.streak_ledger import (
    LoginStreakState,
    advance_streak,
    streak_bonus_xp,
)


# ---------------------------------------------------------------------------
# Pure transitions
# ---------------------------------------------------------------------------

class TestAdvanceStreak:

    @pytest.mark.parametrize("current,longest", [(0, 0), (4, 9), (12, 12)])
    def test_no_previous_login_starts_at_one(self, current, longest):
        state = LoginStreakState(current_streak=current, longest_streak=longest)
        result = advance_streak(state, date(2024, 1, 1))
        assert result.current_streak == 1
        assert result.last_login_date == date(2024, 1, 1)

    def test_consecutive_day_increments(self):
        state = LoginStreakState(5, 5, date(2024, 1, 1))
        result = advance_streak(state, date(2024, 1, 2))
        assert result.current_streak == 6
        assert result.longest_streak >= 6
        assert result.last_login_date == date(2024, 1, 2)

    def test_gap_resets(self):
        state = LoginStreakState(5, 5, date(2024, 1, 1))
        result = advance_streak(state, date(2024, 1, 5))
        assert result.current_streak == 1
        assert result.longest_streak == 5

    def test_two_day_gap_resets(self):
        state = LoginStreakState(3, 3, date(2024, 1, 1))
        assert advance_streak(state, date(2024, 1, 3)).current_streak == 1

    def test_same_day_is_noop(self):
        state = LoginStreakState(5, 8, date(2024, 1, 1))
        assert advance_streak(state, date(2024, 1, 1)) == state

    def test_second_call_same_day_is_idempotent(self):
        state = LoginStreakState(5, 5, date(2024, 1, 1))
        once = advance_streak(state, date(2024, 1, 2))
        assert advance_streak(once, date(2024, 1, 2)) == once

    def test_last_login_in_future_is_noop(self):
        state = LoginStreakState(2, 2, date(2024, 1, 10))
        assert advance_streak(state, date(2024, 1, 9)) == state

    def test_longest_kept_after_reset(self):
        state = LoginStreakState(2, 40, date(2024, 3, 1))
        result = advance_streak(state, date(2024, 3, 2))
        assert result.current_streak == 3
        assert result.longest_streak == 40

    def test_longest_never_below_current_over_a_month(self):
        state = LoginStreakState()
        day = date(2024, 2, 1)
        for offset in [0, 1, 2, 5, 6, 6, 7, 8, 9, 20, 21]:
            state = advance_streak(state, day + timedelta(days=offset))
            assert state.longest_streak >= state.current_streak
        assert state.current_streak == 2
        assert state.longest_streak == 5

    def test_iso_strings_accepted(self):
        state = LoginStreakState(5, 5, "2024-01-01")
        result = advance_streak(state, "2024-01-02")
        assert result.current_streak == 6

    def test_month_boundary_is_consecutive(self):
        state = LoginStreakState(1, 1, date(2024, 2, 29))
        assert advance_streak(state, date(2024, 3, 1)).current_streak == 2

    def test_malformed_date_raises(self):
        with pytest.raises(InvalidInputError):
            advance_streak(LoginStreakState(1, 1, "yesterday-ish"), date(2024, 1, 2))
        with pytest.raises(InvalidInputError):
            advance_streak(LoginStreakState(), "2024-13-45")

    def test_negative_counter_raises(self):
        with pytest.raises(InvalidInputError):
            advance_streak(LoginStreakState(-1, 0, None), date(2024, 1, 2))

    def test_longest_below_current_raises(self):
        with pytest.raises(InvalidInputError) as exc:
            advance_streak(LoginStreakState(5, 3, date(2024, 1, 1)), date(2024, 1, 2))
        assert exc.value.details["field"] == "longest_streak"

    def test_aware_timestamp_counts_on_its_utc_day(self):
        # 01:00 at +04:00 on Jan 2 is still Jan 1 in UTC
        state = LoginStreakState(2, 2, date(2024, 1, 1))
        assert advance_streak(state, "2024-01-02T01:00:00+04:00") == state
        assert advance_streak(state, "2024-01-02T05:00:00+04:00").current_streak == 3


class TestToDate:

    def test_aware_datetime_uses_utc_date(self):
        late = datetime(2024, 1, 2, 1, 0, tzinfo=ZoneInfo("Asia/Dubai"))
        assert to_date(late, "today") == date(2024, 1, 1)

    def test_naive_datetime_is_utc(self):
        assert to_date(datetime(2024, 1, 2, 1, 0), "today") == date(2024, 1, 2)

    def test_plain_date_passes_through(self):
        assert to_date(date(2024, 1, 2), "today") == date(2024, 1, 2)


class TestBonusXp:

    @pytest.mark.parametrize("streak,xp", [
        (0, 0), (1, 10), (6, 10), (7, 15), (29, 15), (30, 25), (99, 25), (100, 50),
    ])
    def test_tiers(self, streak, xp):
        assert streak_bonus_xp(streak) == xp


# ---------------------------------------------------------------------------
# credit_login: persistence and at-most-once
# ---------------------------------------------------------------------------

def _at(y, m, d, hour=12, tz=timezone.utc) -> datetime:
    return datetime(y, m, d, hour, 0, tzinfo=tz)


class TestCreditLogin:

    def test_first_login_credits_day(self, db, make_agent):
        agent = make_agent()
        result = credit_login(db, agent.id, now=_at(2024, 5, 1), tz=timezone.utc)
        assert result.is_new_day is True
        assert result.state.current_streak == 1
        assert result.bonus_xp == 10
        assert get_login_streak_state(db, agent.id).last_login_date == date(2024, 5, 1)

    def test_second_login_same_day_not_counted(self, db, make_agent):
        agent = make_agent()
        credit_login(db, agent.id, now=_at(2024, 5, 1, 8), tz=timezone.utc)
        again = credit_login(db, agent.id, now=_at(2024, 5, 1, 20), tz=timezone.utc)
        assert again.is_new_day is False
        assert again.bonus_xp == 0
        assert again.state.current_streak == 1
        credits = db.query(LoginCredit).filter(LoginCredit.agent_id == agent.id).count()
        assert credits == 1

    def test_consecutive_days_build_streak(self, db, make_agent):
        agent = make_agent()
        for day in range(1, 8):
            result = credit_login(db, agent.id, now=_at(2024, 6, day), tz=timezone.utc)
        assert result.state.current_streak == 7
        assert result.milestone is not None
        assert result.milestone.name == "Week Warrior"
        assert result.bonus_xp == 15

    def test_gap_resets_persisted_streak(self, db, make_agent):
        agent = make_agent(login_streak_current=5, login_streak_longest=5,
                           last_login_date=date(2024, 1, 1))
        result = credit_login(db, agent.id, now=_at(2024, 1, 5), tz=timezone.utc)
        assert result.state.current_streak == 1
        assert result.state.longest_streak == 5

    def test_records_last_login_instant(self, db, make_agent):
        agent = make_agent()
        credit_login(db, agent.id, now=_at(2024, 7, 1, 9), tz=timezone.utc)
        db.refresh(agent)
        assert agent.last_login is not None
        assert agent.last_login_date == date(2024, 7, 1)

    def test_timezone_decides_calendar_day(self, db, make_agent):
        # 23:30 UTC on May 1 is already May 2 in Dubai
        agent = make_agent(login_streak_current=3, login_streak_longest=3,
                           last_login_date=date(2024, 5, 1))
        late = datetime(2024, 5, 1, 23, 30, tzinfo=timezone.utc)
        utc_result = credit_login(db, agent.id, now=late, tz=timezone.utc)
        assert utc_result.is_new_day is False

        dubai_result = credit_login(db, agent.id, now=late, tz=ZoneInfo("Asia/Dubai"))
        assert dubai_result.is_new_day is True
        assert dubai_result.state.current_streak == 4

    def test_existing_credit_row_blocks_double_increment(self, db, make_agent):
        """A concurrent login already inserted today's credit row."""
        agent = make_agent(login_streak_current=2, login_streak_longest=2,
                           last_login_date=date(2024, 8, 1))
        db.add(LoginCredit(agent_id=agent.id, login_date=date(2024, 8, 2)))
        db.commit()

        result = credit_login(db, agent.id, now=_at(2024, 8, 2), tz=timezone.utc)
        assert result.is_new_day is False
        assert get_login_streak_state(db, agent.id).current_streak == 2

    def test_publishes_login_credited(self, db, make_agent):
        agent = make_agent()
        bus = EventBus()
        received = []
        bus.subscribe(EventType.LOGIN_CREDITED, lambda kind, payload: received.append(payload))
        credit_login(db, agent.id, now=_at(2024, 9, 1), tz=timezone.utc, events=bus)
        credit_login(db, agent.id, now=_at(2024, 9, 1, 18), tz=timezone.utc, events=bus)
        assert len(received) == 1
        assert received[0]["agent_id"] == agent.id
        assert received[0]["current_streak"] == 1

    def test_unknown_agent(self, db):
        with pytest.raises(AgentNotFoundError):
            credit_login(db, 999_999, now=_at(2024, 1, 1), tz=timezone.utc)

    def test_save_state_round_trip(self, db, make_agent):
        agent = make_agent()
        save_login_streak_state(db, agent.id, LoginStreakState(4, 9, date(2024, 4, 4)))
        db.commit()
        state = get_login_streak_state(db, agent.id)
        assert state == LoginStreakState(4, 9, date(2024, 4, 4))
