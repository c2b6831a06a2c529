"""
Tests for the Reminder Urgency Classifier.

Urgency depends only on time left until the next local midnight:
  >= 6h low, [2h, 6h) medium, [30min, 2h) high, < 30min critical.
The reminder is shown only in the last 12h before that midnight.
"""
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from telesales.core.errors import InvalidInputError
from telesales.services.reminder import UrgencyLevel, classify_urgency

YESTERDAY = date(2024, 1, 9)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 1, 10, hour, minute, tzinfo=timezone.utc)


class TestUrgencyTiers:

    @pytest.mark.parametrize("hour,minute,level", [
        (0, 0, UrgencyLevel.LOW),
        (12, 0, UrgencyLevel.LOW),
        (18, 0, UrgencyLevel.LOW),        # exactly 6h left
        (18, 1, UrgencyLevel.MEDIUM),
        (20, 0, UrgencyLevel.MEDIUM),
        (22, 0, UrgencyLevel.MEDIUM),     # exactly 2h left
        (22, 30, UrgencyLevel.HIGH),
        (23, 30, UrgencyLevel.HIGH),      # exactly 30min left
        (23, 31, UrgencyLevel.CRITICAL),
        (23, 59, UrgencyLevel.CRITICAL),
    ])
    def test_level_by_time_left(self, hour, minute, level):
        reminder = classify_urgency(5, YESTERDAY, _at(hour, minute))
        assert reminder.level == level

    def test_hours_and_minutes_remaining(self):
        reminder = classify_urgency(5, YESTERDAY, _at(21, 15))
        assert reminder.hours_remaining == 2
        assert reminder.minutes_remaining == 45
        assert reminder.time_remaining == timedelta(hours=2, minutes=45)

    def test_remaining_never_increases_through_the_day(self):
        previous = None
        for hour in range(24):
            remaining = classify_urgency(3, YESTERDAY, _at(hour)).time_remaining
            if previous is not None:
                assert remaining < previous
            previous = remaining

    def test_iso_string_now(self):
        reminder = classify_urgency(5, "2024-01-09", "2024-01-10T23:45:00Z")
        assert reminder.level == UrgencyLevel.CRITICAL
        assert reminder.minutes_remaining == 15


class TestShouldShow:

    def test_active_streak_not_yet_logged_in(self):
        reminder = classify_urgency(5, YESTERDAY, _at(20))
        assert reminder.has_logged_in_today is False
        assert reminder.should_show is True

    @pytest.mark.parametrize("hour,minute,shown", [
        (0, 5, False),
        (11, 59, False),
        (12, 0, False),     # exactly 12h left
        (12, 1, True),
        (23, 59, True),
    ])
    def test_shown_only_in_last_twelve_hours(self, hour, minute, shown):
        assert classify_urgency(3, YESTERDAY, _at(hour, minute)).should_show is shown

    def test_hidden_once_logged_in_today(self):
        reminder = classify_urgency(5, date(2024, 1, 10), _at(23, 50))
        assert reminder.has_logged_in_today is True
        assert reminder.should_show is False
        # the level is still computed
        assert reminder.level == UrgencyLevel.CRITICAL

    def test_hidden_without_streak(self):
        assert classify_urgency(0, YESTERDAY, _at(20)).should_show is False
        assert classify_urgency(0, None, _at(20)).should_show is False

    def test_hidden_when_streak_already_lapsed(self):
        reminder = classify_urgency(4, date(2024, 1, 7), _at(20))
        assert reminder.should_show is False


class TestTimezone:

    def test_local_midnight_is_the_deadline(self):
        # 20:00 UTC is 00:00 the next day in Dubai: a full day left
        reminder = classify_urgency(2, date(2024, 1, 10), _at(20), tz=ZoneInfo("Asia/Dubai"))
        assert reminder.level == UrgencyLevel.LOW
        assert reminder.hours_remaining == 24
        assert reminder.has_logged_in_today is False
        assert reminder.should_show is False

    def test_same_instant_differs_by_zone(self):
        instant = _at(17)
        utc = classify_urgency(2, YESTERDAY, instant)
        new_york = classify_urgency(2, YESTERDAY, instant, tz=ZoneInfo("America/New_York"))
        assert utc.level == UrgencyLevel.LOW
        assert new_york.time_remaining == timedelta(hours=12)


class TestInvalidInput:

    def test_negative_streak(self):
        with pytest.raises(InvalidInputError):
            classify_urgency(-1, YESTERDAY, _at(12))

    def test_bad_last_login_date(self):
        with pytest.raises(InvalidInputError):
            classify_urgency(1, "not-a-date", _at(12))

    def test_bad_now(self):
        with pytest.raises(InvalidInputError):
            classify_urgency(1, YESTERDAY, "noon")

    def test_missing_now(self):
        with pytest.raises(InvalidInputError) as exc:
            classify_urgency(1, YESTERDAY, None)
        assert exc.value.details["field"] == "now"
