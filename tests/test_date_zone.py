"""Tests for the date and time-zone tools."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from tools.date_zone.input_model import (
    MAX_DURATION_HOURS,
    ConvertTimeZoneInput,
    IsTodayInput,
    RegionInput,
    TimeRangeInput,
    TimeZoneNowInput,
    TodayDateInput,
)
from tools.date_zone.tool import (
    convert_between_time_zones,
    format_offset,
    get_available_time_zones,
    get_common_time_zones_by_region,
    get_date_time_in_time_zone,
    get_today_date,
    is_today,
    resolve_time_range,
)

INSTANT = datetime(2025, 4, 10, 7, 30, 0, tzinfo=timezone.utc)


def fixed_time(zone=None):
    if zone is None:
        return INSTANT.replace(tzinfo=None)
    return INSTANT.astimezone(zone)


@pytest.fixture
def frozen_clock():
    with patch("tools.date_zone.tool.current_time", side_effect=fixed_time) as clock:
        yield clock


class TestTodayDate:
    def test_default_format(self, frozen_clock):
        assert get_today_date(TodayDateInput()) == {
            "success": True,
            "today_date": "2025-04-10",
            "format": "%Y-%m-%d",
        }

    def test_custom_format(self, frozen_clock):
        result = get_today_date(TodayDateInput(format="%Y/%m/%d"))

        assert result["today_date"] == "2025/04/10"

    def test_format_without_directives_is_rejected(self, frozen_clock):
        result = get_today_date(TodayDateInput(format="yyyy-MM-dd"))

        assert result["success"] is False
        assert "Invalid date format" in result["error"]


class TestDateTimeInTimeZone:
    def test_taipei(self, frozen_clock):
        result = get_date_time_in_time_zone(TimeZoneNowInput(time_zone="Asia/Taipei"))

        assert result["success"] is True
        assert result["date_time"] == "2025-04-10 15:30:00"
        assert result["offset_hours"] == 8.0

    def test_half_hour_offset(self, frozen_clock):
        result = get_date_time_in_time_zone(TimeZoneNowInput(time_zone="Asia/Kolkata"))

        assert result["offset_hours"] == 5.5

    def test_unknown_zone(self, frozen_clock):
        result = get_date_time_in_time_zone(TimeZoneNowInput(time_zone="Mars/Olympus"))

        assert result == {
            "success": False,
            "error": "Unknown time zone 'Mars/Olympus'",
            "time_zone": "Mars/Olympus",
        }


class TestConvertBetweenTimeZones:
    def test_taipei_to_new_york_in_daylight_saving(self):
        result = convert_between_time_zones(
            ConvertTimeZoneInput(
                date_time="2025-04-10 15:30:00",
                source_time_zone="Asia/Taipei",
                target_time_zone="America/New_York",
            )
        )

        assert result["converted_date_time"] == "2025-04-10 03:30:00"
        assert result["source_offset"] == "+08:00"
        assert result["target_offset"] == "-04:00"

    def test_utc_offset_renders_as_z(self):
        result = convert_between_time_zones(
            ConvertTimeZoneInput(
                date_time="2025-01-01 00:00:00",
                source_time_zone="UTC",
                target_time_zone="Asia/Tokyo",
            )
        )

        assert result["source_offset"] == "Z"
        assert result["converted_date_time"] == "2025-01-01 09:00:00"

    def test_date_time_not_matching_format(self):
        result = convert_between_time_zones(
            ConvertTimeZoneInput(
                date_time="10/04/2025",
                source_time_zone="UTC",
                target_time_zone="Asia/Tokyo",
            )
        )

        assert result["success"] is False
        assert result["original_date_time"] == "10/04/2025"


@pytest.mark.parametrize(
    "offset, expected",
    [
        (timedelta(0), "Z"),
        (timedelta(hours=8), "+08:00"),
        (timedelta(hours=-3, minutes=-30), "-03:30"),
        (None, "Z"),
    ],
)
def test_format_offset(offset, expected):
    assert format_offset(offset) == expected


class TestTimeZoneListings:
    def test_available_time_zones(self):
        result = get_available_time_zones()

        assert "Asia/Taipei" in result["available_time_zones"]
        assert result["count"] == len(result["available_time_zones"])
        assert result["available_time_zones"] == sorted(result["available_time_zones"])

    def test_region(self):
        result = get_common_time_zones_by_region(RegionInput(region="Asia"))

        assert "Asia/Taipei" in result["time_zones"]
        assert all(z.startswith("Asia") for z in result["time_zones"])

    def test_unknown_region_lists_regions(self):
        result = get_common_time_zones_by_region(RegionInput(region="Atlantis"))

        assert result["success"] is False
        assert "Europe" in result["error"]


class TestIsToday:
    def test_today(self, frozen_clock):
        assert is_today(IsTodayInput(date="2025-04-10")) == {
            "success": True,
            "date": "2025-04-10",
            "is_today": True,
            "today": "2025-04-10",
        }

    def test_another_day(self, frozen_clock):
        assert is_today(IsTodayInput(date="2025-04-09"))["is_today"] is False

    def test_invalid_date(self, frozen_clock):
        result = is_today(IsTodayInput(date="2025-02-30"))

        assert result["success"] is False


class TestResolveTimeRange:
    def test_defaults_look_ahead_from_now_in_zone(self, frozen_clock):
        result = resolve_time_range(TimeRangeInput(time_zone="Asia/Taipei"))

        assert result["time_from"] == "2025-04-10 15:30:00"
        assert result["time_to"] == "2025-04-11 15:30:00"
        assert result["duration_hours"] == 24

    def test_lookback_defaults(self, frozen_clock):
        result = resolve_time_range(TimeRangeInput(lookback=True, max_duration_hours=36))

        assert result["time_from"] == "2025-04-08 19:30:00"
        assert result["time_to"] == "2025-04-10 07:30:00"

    def test_clamps_long_window(self, frozen_clock):
        result = resolve_time_range(
            TimeRangeInput(
                time_from="2025-04-01 00:00:00",
                time_to="2025-04-05 00:00:00",
                max_duration_hours=48,
            )
        )

        assert result["time_to"] == "2025-04-03 00:00:00"
        assert result["duration_hours"] == 48

    def test_end_only_rejected_when_disallowed(self, frozen_clock):
        result = resolve_time_range(
            TimeRangeInput(time_to="2025-04-05 00:00:00", allow_end_only=False)
        )

        assert result["success"] is False
        assert result["reason"] == "end provided without start is not allowed"

    def test_weather_pattern_is_rejected(self, frozen_clock):
        result = resolve_time_range(TimeRangeInput(time_from="2025-04-01T00:00:00"))

        assert result["success"] is False
        assert result["reason"] == "unparseable timestamp"

    def test_unknown_zone(self, frozen_clock):
        result = resolve_time_range(TimeRangeInput(time_zone="Nowhere/Land"))

        assert result["success"] is False

    @pytest.mark.parametrize("hours", [1e8, 1e12])
    def test_oversized_duration_is_rejected_by_the_model(self, hours):
        with pytest.raises(ValidationError):
            TimeRangeInput(max_duration_hours=hours)

    @pytest.mark.parametrize("lookback", [True, False])
    def test_longest_allowed_duration_resolves(self, frozen_clock, lookback):
        result = resolve_time_range(
            TimeRangeInput(max_duration_hours=MAX_DURATION_HOURS, lookback=lookback)
        )

        assert result["success"] is True
        assert result["duration_hours"] == MAX_DURATION_HOURS

    def test_start_near_calendar_limit(self, frozen_clock):
        result = resolve_time_range(TimeRangeInput(time_from="9999-12-31 12:00:00"))

        assert result["success"] is True
        assert result["time_to"] == "9999-12-31 23:59:59"
