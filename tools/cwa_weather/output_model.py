"""
Output models for the CWA weather tools.

The records payload is passed through from the CWA API unchanged.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class WeatherRecordsOutput(BaseModel):
    """Records returned by a CWA datastore query, with the window actually queried."""

    success: bool = Field(..., description="Whether the query succeeded")
    dataset_id: Optional[str] = Field(
        None, description="CWA dataset that was queried", examples=["F-C0032-001"]
    )
    time_from: Optional[str] = Field(
        None,
        description="Resolved start of the queried window",
        examples=["2025-01-01T06:00:00"],
    )
    time_to: Optional[str] = Field(
        None,
        description="Resolved end of the queried window",
        examples=["2025-01-02T06:00:00"],
    )
    records: Optional[Dict[str, Any]] = Field(
        None, description="The 'records' sub-tree of the CWA response"
    )
    error: Optional[str] = Field(None, description="Error message if the query failed")

    class Config:
        """Pydantic configuration."""

        extra = "allow"
        json_schema_extra = {
            "examples": [
                {
                    "success": True,
                    "dataset_id": "E-A0015-001",
                    "time_from": "2025-01-01T00:00:00",
                    "time_to": "2025-01-02T12:00:00",
                    "records": {"Earthquake": []},
                },
                {
                    "success": False,
                    "error": "end precedes start: end '2025-04-01T00:00:00' is before start '2025-04-02T00:00:00'",
                    "dataset_id": "E-A0015-001",
                },
            ]
        }


class DatasetIdOutput(BaseModel):
    """Township forecast dataset id for a city or county."""

    success: bool = Field(..., description="Whether the city was recognised")
    city_name: Optional[str] = Field(None, description="Normalised city name")
    dataset_id: Optional[str] = Field(
        None, description="Township forecast dataset id", examples=["F-D0047-061"]
    )
    error: Optional[str] = Field(None, description="Error message for unknown cities")

    class Config:
        """Pydantic configuration."""

        extra = "allow"
