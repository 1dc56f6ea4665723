"""Tests for cron-style schedule matching."""

from datetime import datetime

import pytest

from src.activation.domain.cron import (
    check_schedules,
    cron_daily_at,
    cron_weekdays_at,
    matches_field,
    parse_time,
    should_trigger,
)
from src.activation.domain.models import ClockReading, Schedule


def at(year, month, day, hour, minute):
    return ClockReading.from_datetime(datetime(year, month, day, hour, minute))


def schedule(cron, profile_id="work", schedule_id="s1", enabled=True):
    return Schedule(id=schedule_id, profile_id=profile_id, cron_expression=cron, enabled=enabled)


# 2026-03-10 is a Tuesday, 2026-03-14 a Saturday
TUESDAY_0930 = at(2026, 3, 10, 9, 30)
SATURDAY_0930 = at(2026, 3, 14, 9, 30)


class TestMatchesField:
    def test_wildcard(self):
        assert matches_field("*", 5)
        assert matches_field("*", 59)

    def test_number(self):
        assert matches_field("5", 5)
        assert not matches_field("5", 6)

    @pytest.mark.parametrize("value", range(0, 12))
    def test_range(self, value):
        assert matches_field("1-5", value) == (1 <= value <= 5)

    @pytest.mark.parametrize("value", range(0, 60))
    def test_step(self, value):
        assert matches_field("*/5", value) == (value % 5 == 0)

    def test_list(self):
        assert matches_field("1,3,5", 3)
        assert not matches_field("1,3,5", 2)

    def test_list_of_ranges_and_numbers(self):
        assert matches_field("1-3,10", 2)
        assert matches_field("1-3,10", 10)
        assert not matches_field("1-3,10", 5)

    def test_list_elements_are_trimmed(self):
        assert matches_field("1, 3", 3)

    @pytest.mark.parametrize("field", ["a-5", "1-b", "1-2-3", "-5", "5-"])
    def test_malformed_range_never_matches(self, field):
        assert not matches_field(field, 5)
        assert not matches_field(field, 1)

    @pytest.mark.parametrize("field", ["*/0", "*/x", "*/", "*/-1"])
    def test_bad_step_never_matches(self, field):
        assert not matches_field(field, 0)
        assert not matches_field(field, 10)

    def test_garbage_never_matches(self):
        assert not matches_field("abc", 0)
        assert not matches_field("", 0)
        assert not matches_field("+5", 5)


class TestShouldTrigger:
    def test_all_wildcards_fire_every_minute(self):
        s = schedule("* * * * *")
        assert should_trigger(s, TUESDAY_0930)
        assert should_trigger(s, at(2026, 12, 31, 23, 59))
        assert should_trigger(s, at(2026, 1, 1, 0, 0))

    def test_weekday_morning(self):
        s = schedule("30 9 * * 1-5")
        assert should_trigger(s, TUESDAY_0930)
        assert not should_trigger(s, SATURDAY_0930)
        assert not should_trigger(s, at(2026, 3, 10, 9, 31))

    def test_sunday_is_zero(self):
        sunday = at(2026, 3, 15, 8, 0)
        assert should_trigger(schedule("0 8 * * 0"), sunday)
        assert not should_trigger(schedule("0 8 * * 7"), sunday)

    def test_day_of_month_and_month(self):
        s = schedule("0 12 25 12 *")
        assert should_trigger(s, at(2026, 12, 25, 12, 0))
        assert not should_trigger(s, at(2026, 11, 25, 12, 0))

    def test_disabled_never_fires(self):
        assert not should_trigger(schedule("* * * * *", enabled=False), TUESDAY_0930)

    @pytest.mark.parametrize("cron", ["* * * *", "* * * * * *", "", "30 9"])
    def test_wrong_field_count_never_fires(self, cron):
        assert not should_trigger(schedule(cron), TUESDAY_0930)

    def test_extra_whitespace_is_ignored(self):
        assert should_trigger(schedule("  30   9 * *  2 "), TUESDAY_0930)


class TestCheckSchedules:
    def test_returns_triggered_profile_ids_in_order(self):
        schedules = [
            schedule("30 9 * * *", profile_id="office", schedule_id="a"),
            schedule("0 18 * * *", profile_id="home", schedule_id="b"),
            schedule("*/15 * * * *", profile_id="vpn", schedule_id="c"),
        ]
        assert check_schedules(schedules, TUESDAY_0930) == ["office", "vpn"]

    def test_preserves_duplicates(self):
        schedules = [
            schedule("30 9 * * *", profile_id="office", schedule_id="a"),
            schedule("* * * * 2", profile_id="office", schedule_id="b"),
        ]
        assert check_schedules(schedules, TUESDAY_0930) == ["office", "office"]

    def test_empty(self):
        assert check_schedules([], TUESDAY_0930) == []


class TestHelpers:
    def test_parse_time(self):
        assert parse_time("09:30") == (9, 30)
        assert parse_time("23:59") == (23, 59)

    @pytest.mark.parametrize("value", ["24:00", "12:60", "9", "ab:cd", "1:2:3", ""])
    def test_parse_time_invalid(self, value):
        assert parse_time(value) is None

    def test_cron_daily_at(self):
        assert cron_daily_at(9, 30) == "30 9 * * *"

    def test_cron_weekdays_at(self):
        expr = cron_weekdays_at(9, 30, "1-5")
        assert expr == "30 9 * * 1-5"
        assert should_trigger(schedule(expr), TUESDAY_0930)
