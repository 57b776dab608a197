"""Output model for the date and time-zone tools."""

from typing import List, Optional

from pydantic import BaseModel, Field


class DateZoneOutput(BaseModel):
    """
    Envelope returned by every date/time-zone tool.

    Only the fields relevant to the called tool are present.
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    error: Optional[str] = Field(None, description="Error message if it failed")
    today_date: Optional[str] = None
    date_time: Optional[str] = None
    format: Optional[str] = None
    time_zone: Optional[str] = Field(None, examples=["Asia/Taipei"])
    offset_hours: Optional[float] = Field(None, examples=[8.0])
    original_date_time: Optional[str] = None
    original_time_zone: Optional[str] = None
    converted_date_time: Optional[str] = None
    target_time_zone: Optional[str] = None
    source_offset: Optional[str] = Field(None, examples=["+08:00"])
    target_offset: Optional[str] = Field(None, examples=["-04:00"])
    available_time_zones: Optional[List[str]] = None
    region: Optional[str] = None
    time_zones: Optional[List[str]] = None
    count: Optional[int] = None
    date: Optional[str] = None
    is_today: Optional[bool] = None
    today: Optional[str] = None
    time_from: Optional[str] = None
    time_to: Optional[str] = None
    duration_hours: Optional[float] = None

    class Config:
        """Pydantic configuration."""

        extra = "allow"
        json_schema_extra = {
            "examples": [
                {
                    "success": True,
                    "date_time": "2025-04-10 15:30:00",
                    "time_zone": "Asia/Taipei",
                    "format": "%Y-%m-%d %H:%M:%S",
                    "offset_hours": 8.0,
                },
                {
                    "success": False,
                    "error": "Unknown time zone 'Mars/Olympus'",
                },
            ]
        }
