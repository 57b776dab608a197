"""Input models for the date and time-zone tools."""

from typing import Optional

from pydantic import BaseModel, Field

# 100 years
MAX_DURATION_HOURS = 24 * 365 * 100


class TodayDateInput(BaseModel):
    format: str = Field(
        "%Y-%m-%d", description="strftime date format, default is %Y-%m-%d"
    )


class TimeZoneNowInput(BaseModel):
    time_zone: str = Field(
        ...,
        description="Time zone ID, e.g.: Asia/Taipei, America/New_York, Europe/London, UTC",
        examples=["Asia/Taipei"],
    )
    format: str = Field(
        "%Y-%m-%d %H:%M:%S",
        description="strftime date time format, default is %Y-%m-%d %H:%M:%S",
    )


class ConvertTimeZoneInput(BaseModel):
    date_time: str = Field(
        ..., description="Date time string", examples=["2025-04-10 15:30:00"]
    )
    source_time_zone: str = Field(
        ..., description="Source time zone ID, e.g.: Asia/Taipei"
    )
    target_time_zone: str = Field(
        ..., description="Target time zone ID, e.g.: America/New_York"
    )
    format: str = Field(
        "%Y-%m-%d %H:%M:%S",
        description="strftime format of date_time, also used for the result",
    )


class RegionInput(BaseModel):
    region: str = Field(
        ...,
        description="Region name (Asia, Europe, America, Pacific, Australia, Africa)",
        examples=["Asia"],
    )


class IsTodayInput(BaseModel):
    date: str = Field(..., description="Date string (YYYY-MM-DD)", examples=["2025-04-10"])


class TimeRangeInput(BaseModel):
    """
    Input model for resolving a partially specified time range.

    Timestamps use the "YYYY-MM-DD HH:MM:SS" pattern and are interpreted in
    time_zone.
    """

    time_from: Optional[str] = Field(
        None, description="Start time (YYYY-MM-DD HH:MM:SS)", examples=["2025-01-01 00:00:00"]
    )
    time_to: Optional[str] = Field(None, description="End time (YYYY-MM-DD HH:MM:SS)")
    max_duration_hours: float = Field(
        24,
        gt=0,
        le=MAX_DURATION_HOURS,
        description="Longest allowed window in hours (at most 100 years); longer ranges are clamped",
    )
    lookback: bool = Field(
        False,
        description="Default window when no bounds are given: the past max_duration_hours "
        "if true, the next max_duration_hours if false",
    )
    allow_end_only: bool = Field(
        True,
        description="Whether time_to alone is accepted (start is derived) or rejected",
    )
    time_zone: str = Field("UTC", description="Time zone used to determine now")
