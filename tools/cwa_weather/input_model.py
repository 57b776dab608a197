"""Input models for the CWA weather tools."""

from typing import List, Optional

from pydantic import BaseModel, Field

TIME_FORMAT_HINT = "format: yyyy-MM-ddThh:mm:ss, Taiwan local time"


class WeatherForecastInput(BaseModel):
    """Input model for the 36-hour city forecast."""

    location_name: str = Field(
        ...,
        description="City or county name, for example: 花蓮縣、臺東縣",
        examples=["臺北市"],
    )
    element_name: Optional[List[str]] = Field(
        None,
        description=(
            "Forecast factors: Wx (weather phenomenon), PoP (precipitation "
            "probability), MinT (minimum temperature), MaxT (maximum temperature), "
            "CI (comfort index). Returns all by default"
        ),
        examples=[["Wx", "PoP"]],
    )
    time_from: Optional[str] = Field(
        None, description=f"Start time of period, {TIME_FORMAT_HINT}"
    )
    time_to: Optional[str] = Field(
        None, description=f"End time of period, {TIME_FORMAT_HINT}"
    )


class EarthquakeInput(BaseModel):
    """Input model for felt earthquake reports."""

    area_name: str = Field(
        ...,
        description="City or county name, for example: 花蓮縣、臺東縣",
        examples=["花蓮縣"],
    )
    time_from: Optional[str] = Field(None, description=f"Start time, {TIME_FORMAT_HINT}")
    time_to: Optional[str] = Field(None, description=f"End time, {TIME_FORMAT_HINT}")


class CityDatasetInput(BaseModel):
    """Input model for looking up a township forecast dataset id."""

    city_name: str = Field(
        ...,
        description="City or county name (台 and 臺 are both accepted), e.g. 台北市",
        examples=["台北市"],
    )


class TownshipForecastInput(BaseModel):
    """Input model for township-level forecasts."""

    location_id: str = Field(
        ...,
        description=(
            "Township forecast dataset id of the city, as returned by "
            "get_city_forecast_dataset_id (e.g. F-D0047-061)"
        ),
        examples=["F-D0047-061"],
    )
    location_name: str = Field(
        ...,
        description="Township or district name, for example: 中正區、信義區",
        examples=["信義區"],
    )
    time_from: Optional[str] = Field(
        None, description=f"Start time of period, {TIME_FORMAT_HINT}"
    )
    time_to: Optional[str] = Field(
        None,
        description=f"End time of period, {TIME_FORMAT_HINT}; requires time_from",
    )
