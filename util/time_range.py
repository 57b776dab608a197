"""
Time range resolution for time-windowed data source queries.

Turns a partially specified, textual time range (as supplied by a tool caller)
into a fully specified window that respects a per-call-site policy. The
resolver is pure: "now" is always passed in, never read from a clock.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

WEATHER_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"
DATE_ZONE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Windows longer than this are clamped to "now" when only a start is given.
NOW_CLAMP_THRESHOLD = timedelta(hours=24)


def shift(value: datetime, delta: timedelta) -> datetime:
    """Add delta to value, saturating at datetime.min and datetime.max."""
    try:
        return value + delta
    except OverflowError:
        return datetime.max if delta > timedelta(0) else datetime.min


def align(value: datetime, step: timedelta, round_up: bool = False) -> datetime:
    """
    Snap value to a multiple of step (counted from midnight).

    Rounds down unless round_up is set. Used to keep default windows stable
    across calls made a few seconds apart.
    """
    midnight = value.replace(hour=0, minute=0, second=0, microsecond=0)
    offset = value - midnight
    remainder = offset % step
    if not remainder:
        return value
    if round_up:
        return shift(value, step - remainder)
    return value - remainder


class InvalidInputError(ValueError):
    """Raised when a raw time range cannot be resolved into a window."""

    UNPARSEABLE_TIMESTAMP = "unparseable timestamp"
    END_BEFORE_START = "end precedes start"
    END_WITHOUT_START = "end provided without start is not allowed"

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        message = f"{reason}: {detail}" if detail else reason
        super().__init__(message)


@dataclass(frozen=True)
class TimeWindow:
    """A resolved (start, end) pair with start <= end."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def format(self, pattern: str = WEATHER_TIMESTAMP_FORMAT) -> tuple[str, str]:
        """Render both ends with the given strftime pattern."""
        return format_timestamp(self.start, pattern), format_timestamp(
            self.end, pattern
        )


@dataclass(frozen=True)
class ResolutionPolicy:
    """
    Per-call-site configuration for resolve().

    Attributes:
        default_start: Start used when neither bound is supplied.
        default_end: End used when neither bound is supplied.
        max_duration: Longest window the downstream source should be asked for.
        allow_end_only: Whether an end without a start derives the start
            (True) or is rejected (False).
    """

    default_start: datetime
    default_end: datetime
    max_duration: timedelta
    allow_end_only: bool = True

    @classmethod
    def looking_back(
        cls, now: datetime, max_duration: timedelta, allow_end_only: bool = True
    ) -> "ResolutionPolicy":
        """Policy whose default window ends at now, e.g. recent observations."""
        return cls(shift(now, -max_duration), now, max_duration, allow_end_only)

    @classmethod
    def looking_ahead(
        cls, now: datetime, max_duration: timedelta, allow_end_only: bool = True
    ) -> "ResolutionPolicy":
        """Policy whose default window starts at now, e.g. forecasts."""
        return cls(now, shift(now, max_duration), max_duration, allow_end_only)


def parse_timestamp(text: str, pattern: str = WEATHER_TIMESTAMP_FORMAT) -> datetime:
    """
    Parse a timestamp in the agreed pattern.

    Parsing is strict: the text must be exactly what formatting the parsed
    value produces, so "2025-1-1T0:0:0" is rejected even though strptime
    would accept it. Years are always four digits, so "0999-01-01T00:00:00"
    is accepted and "999-01-01T00:00:00" is not.

    Raises:
        InvalidInputError: If the text does not match the pattern.
    """
    try:
        parsed = datetime.strptime(text, pattern)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(
            InvalidInputError.UNPARSEABLE_TIMESTAMP, f"'{text}' ({e})"
        ) from e

    if format_timestamp(parsed, pattern) != text:
        raise InvalidInputError(
            InvalidInputError.UNPARSEABLE_TIMESTAMP,
            f"'{text}' does not match pattern '{pattern}'",
        )
    return parsed


def format_timestamp(value: datetime, pattern: str = WEATHER_TIMESTAMP_FORMAT) -> str:
    """
    Render a timestamp with the given strftime pattern.

    %Y is always written as four zero-padded digits ("0999"), whatever the
    platform strftime does for years below 1000.
    """
    return value.strftime(pattern.replace("%Y", f"{value.year:04d}"))


def _is_present(raw: Optional[str]) -> bool:
    return raw is not None and raw.strip() != ""


def resolve(
    raw_start: Optional[str],
    raw_end: Optional[str],
    now: datetime,
    policy: ResolutionPolicy,
    pattern: str = WEATHER_TIMESTAMP_FORMAT,
) -> TimeWindow:
    """
    Resolve optional textual bounds into a policy-compliant TimeWindow.

    Blank strings count as absent.

    Args:
        raw_start: Start timestamp text, or None.
        raw_end: End timestamp text, or None.
        now: Evaluation instant.
        policy: Defaults, maximum window length, and end-only handling.
        pattern: strftime pattern the raw bounds are written in.

    Returns:
        The resolved TimeWindow.

    Raises:
        InvalidInputError: If a bound is unparseable, the end precedes the
            start, or an end is given alone and the policy disallows it.
    """
    has_start = _is_present(raw_start)
    has_end = _is_present(raw_end)

    if not has_start and not has_end:
        return TimeWindow(policy.default_start, policy.default_end)

    if has_start and has_end:
        start = parse_timestamp(raw_start, pattern)
        end = parse_timestamp(raw_end, pattern)
        if end < start:
            raise InvalidInputError(
                InvalidInputError.END_BEFORE_START,
                f"end '{raw_end}' is before start '{raw_start}'",
            )
        return TimeWindow(start, min(end, shift(start, policy.max_duration)))

    if has_start:
        start = parse_timestamp(raw_start, pattern)
        end = shift(start, policy.max_duration)
        if end > now and policy.max_duration > NOW_CLAMP_THRESHOLD:
            # never clamp below the start itself
            end = max(now, start)
        return TimeWindow(start, end)

    if not policy.allow_end_only:
        raise InvalidInputError(
            InvalidInputError.END_WITHOUT_START, f"end '{raw_end}' given alone"
        )
    end = parse_timestamp(raw_end, pattern)
    return TimeWindow(shift(end, -policy.max_duration), end)


__all__ = [
    "DATE_ZONE_TIMESTAMP_FORMAT",
    "InvalidInputError",
    "ResolutionPolicy",
    "TimeWindow",
    "WEATHER_TIMESTAMP_FORMAT",
    "align",
    "format_timestamp",
    "parse_timestamp",
    "resolve",
    "shift",
]
