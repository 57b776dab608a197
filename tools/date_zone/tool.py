"""Date and time-zone utility tools."""

import logging
from datetime import datetime, timedelta
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from util.envelope import error_response, success_response
from util.time_range import (
    DATE_ZONE_TIMESTAMP_FORMAT,
    InvalidInputError,
    ResolutionPolicy,
    resolve,
)

from .input_model import (
    ConvertTimeZoneInput,
    IsTodayInput,
    RegionInput,
    TimeRangeInput,
    TimeZoneNowInput,
    TodayDateInput,
)

logger = logging.getLogger(__name__)

REGIONS = ("Asia", "Europe", "America", "Pacific", "Australia", "Africa")


class DateFormatError(ValueError):
    """Raised for a date format that is not a usable strftime pattern."""


def current_time(zone: Optional[ZoneInfo] = None) -> datetime:
    """Current time in zone, or local time when zone is None."""
    return datetime.now(zone)


def _get_zone(time_zone: str) -> ZoneInfo:
    try:
        return ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown time zone '{time_zone}'") from e


def _check_format(fmt: str) -> str:
    if "%" not in fmt:
        raise DateFormatError(
            f"Invalid date format '{fmt}': expected strftime directives such as %Y-%m-%d"
        )
    return fmt


def format_offset(offset: Optional[timedelta]) -> str:
    """Render a UTC offset as +HH:MM, or Z for UTC itself."""
    if not offset:
        return "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def get_today_date(params: TodayDateInput) -> Dict:
    """Get today's date."""
    try:
        fmt = _check_format(params.format)
        today = current_time().strftime(fmt)
    except ValueError as e:
        return error_response(str(e), format=params.format)
    return success_response(today_date=today, format=fmt)


def get_date_time_in_time_zone(params: TimeZoneNowInput) -> Dict:
    """Get the current date time in a time zone."""
    try:
        fmt = _check_format(params.format)
        now = current_time(_get_zone(params.time_zone))
        rendered = now.strftime(fmt)
    except ValueError as e:
        return error_response(str(e), time_zone=params.time_zone)

    return success_response(
        date_time=rendered,
        time_zone=params.time_zone,
        format=fmt,
        offset_hours=now.utcoffset().total_seconds() / 3600,
    )


def convert_between_time_zones(params: ConvertTimeZoneInput) -> Dict:
    """Convert a wall-clock date time from one time zone to another."""
    try:
        fmt = _check_format(params.format)
        source_zone = _get_zone(params.source_time_zone)
        target_zone = _get_zone(params.target_time_zone)
        local = datetime.strptime(params.date_time, fmt)
    except ValueError as e:
        return error_response(str(e), original_date_time=params.date_time)

    source = local.replace(tzinfo=source_zone)
    target = source.astimezone(target_zone)

    return success_response(
        original_date_time=params.date_time,
        original_time_zone=params.source_time_zone,
        converted_date_time=target.strftime(fmt),
        target_time_zone=params.target_time_zone,
        source_offset=format_offset(source.utcoffset()),
        target_offset=format_offset(target.utcoffset()),
    )


def get_available_time_zones() -> Dict:
    """List every time zone ID known to the tz database."""
    zones = sorted(available_timezones())
    return success_response(available_time_zones=zones, count=len(zones))


def get_common_time_zones_by_region(params: RegionInput) -> Dict:
    """List time zone IDs under a region prefix."""
    zones = sorted(z for z in available_timezones() if z.startswith(params.region))
    if not zones:
        return error_response(
            f"No time zones found for region '{params.region}'. "
            f"Available regions: {', '.join(REGIONS)}"
        )
    return success_response(region=params.region, time_zones=zones, count=len(zones))


def is_today(params: IsTodayInput) -> Dict:
    """Check whether a YYYY-MM-DD date is today (local time)."""
    try:
        day = datetime.strptime(params.date, "%Y-%m-%d").date()
    except ValueError as e:
        return error_response(f"Invalid date '{params.date}': {e}", date=params.date)

    today = current_time().date()
    return success_response(
        date=params.date, is_today=day == today, today=today.isoformat()
    )


def resolve_time_range(params: TimeRangeInput) -> Dict:
    """
    Resolve an optional start/end pair into a bounded time window.

    Missing bounds are derived from the maximum duration, over-long windows
    are clamped, and an end before the start is rejected.
    """
    try:
        zone = _get_zone(params.time_zone)
    except ValueError as e:
        return error_response(str(e), time_zone=params.time_zone)

    now = current_time(zone).replace(tzinfo=None, microsecond=0)
    max_duration = timedelta(hours=params.max_duration_hours)
    make_policy = (
        ResolutionPolicy.looking_back if params.lookback else ResolutionPolicy.looking_ahead
    )
    policy = make_policy(now, max_duration, params.allow_end_only)

    try:
        window = resolve(
            params.time_from,
            params.time_to,
            now,
            policy,
            pattern=DATE_ZONE_TIMESTAMP_FORMAT,
        )
    except InvalidInputError as e:
        logger.info("Rejected time range: %s", e)
        return error_response(str(e), reason=e.reason, time_zone=params.time_zone)

    time_from, time_to = window.format(DATE_ZONE_TIMESTAMP_FORMAT)
    return success_response(
        time_from=time_from,
        time_to=time_to,
        duration_hours=window.duration.total_seconds() / 3600,
        time_zone=params.time_zone,
    )
