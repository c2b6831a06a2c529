"""
Tests for agent XP and level tiers.
"""
import pytest

from telesales.core.errors import InvalidInputError
from telesales.services.agent_level import (
    LEVEL_TIERS,
    compute_agent_level,
    level_for_xp,
    login_streak_xp,
    total_xp,
)
from telesales.services.goal_streak import GoalMetric, GoalStreak
from telesales.services.milestone_catalog import GoalType


def test_tiers_ascend():
    xps = [t.min_xp for t in LEVEL_TIERS]
    assert xps == sorted(xps)
    assert [t.level for t in LEVEL_TIERS] == list(range(1, 11))


@pytest.mark.parametrize("streak,xp", [(0, 0), (1, 10), (7, 84), (30, 450), (100, 2000)])
def test_login_streak_xp(streak, xp):
    assert login_streak_xp(streak) == xp


def test_total_xp_sums_sources():
    streaks = [
        GoalStreak(GoalMetric.CALLS, GoalType.WEEKLY, current_streak=3, longest_streak=5),
        GoalStreak(GoalMetric.LEADS, GoalType.MONTHLY, current_streak=1, longest_streak=1),
    ]
    # goals 2*50, weekly 3*25 + 5*10, monthly 1*100 + 1*10, login 7 days 84
    assert total_xp(2, streaks, login_streak=7) == 100 + 125 + 110 + 84


def test_total_xp_rejects_negative():
    with pytest.raises(InvalidInputError):
        total_xp(-1, [])


class TestLevelForXp:

    def test_zero(self):
        level = level_for_xp(0)
        assert level.current.name == "Rookie"
        assert level.next.name == "Apprentice"
        assert level.progress_percentage == 0

    def test_mid_level(self):
        level = level_for_xp(309)
        assert level.current.level == 3
        assert level.xp_into_level == 9
        assert level.xp_to_next_level == 291
        assert level.progress_percentage == 3

    def test_exact_boundary(self):
        assert level_for_xp(1000).current.name == "Expert"

    def test_top_tier(self):
        level = level_for_xp(9000)
        assert level.current.name == "Grandmaster"
        assert level.next is None
        assert level.xp_to_next_level == 0
        assert level.progress_percentage == 100


def test_compute_agent_level():
    streaks = [GoalStreak(GoalMetric.CALLS, GoalType.WEEKLY, current_streak=4, longest_streak=4)]
    level = compute_agent_level(completed_goals=4, streaks=streaks, login_streak=0)
    # 200 + 100 + 40
    assert level.total_xp == 340
    assert level.current.name == "Associate"
