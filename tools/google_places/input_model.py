"""Input models for the Google Places tools."""

from typing import Optional

from pydantic import BaseModel, Field

LANGUAGE = "Language code (e.g. 'zh-TW', 'en')"
FIELDS = (
    "Return fields (comma-separated, e.g. id,displayName,formattedAddress). "
    "Call get_field_mask_description to see all available fields."
)


class SearchPlacesInput(BaseModel):
    """Text search, optionally biased towards a circle around a point."""

    query: str = Field(..., description="Text query to search places", examples=["牛肉麵"])
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude of search center")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude of search center")
    radius: float = Field(500.0, gt=0, le=50000, description="Search radius in meters")
    language: str = Field("zh-TW", description=LANGUAGE)
    max_results: int = Field(20, ge=1, le=20, description="Maximum number of results to return (max 20)")
    open_now: Optional[bool] = Field(None, description="Whether place must be currently open")
    included_type: Optional[str] = Field(
        None, description="Included place type (e.g. 'restaurant', 'hospital')"
    )
    min_rating: Optional[float] = Field(None, ge=0, le=5, description="Minimum rating (e.g. 4.0)")
    price_levels: Optional[str] = Field(
        None, description="Price levels (comma-separated, e.g. 'MODERATE,EXPENSIVE')"
    )
    fields: Optional[str] = Field(None, description=FIELDS)


class NearbyPlacesInput(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude of search center")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude of search center")
    radius: float = Field(500.0, gt=0, le=50000, description="Search radius in meters")
    included_primary_type: Optional[str] = Field(
        None, description="Included primary place type (e.g. 'restaurant', 'hospital')"
    )
    language: str = Field("zh-TW", description=LANGUAGE)
    max_results: int = Field(20, ge=1, le=20, description="Maximum number of results to return (max 20)")
    rank_preference: Optional[str] = Field(
        None, description="Ranking preference (DISTANCE or POPULARITY, default is not set)"
    )
    fields: Optional[str] = Field(None, description=FIELDS)


class AutocompleteInput(BaseModel):
    input: str = Field(..., description="Text input for autocomplete")
    latitude: Optional[float] = Field(None, ge=-90, le=90, description="Latitude of preferred location center")
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="Longitude of preferred location center")
    radius: Optional[float] = Field(None, gt=0, le=50000, description="Location preference radius in meters")
    included_primary_type: Optional[str] = Field(
        None, description="Included primary type (e.g. 'establishment', 'geocode')"
    )
    language: str = Field("zh-TW", description=LANGUAGE)


class PlaceDetailsInput(BaseModel):
    place_id: str = Field(..., description="Google Place ID")
    language: str = Field("zh-TW", description=LANGUAGE)
    region_code: Optional[str] = Field(None, description="Region code (e.g. 'TW', 'US')")


class PlacePhotoInput(BaseModel):
    photo_name: str = Field(
        ...,
        description="Photo resource name (e.g. places/PLACE_ID/photos/PHOTO_REFERENCE)",
    )
    max_width: int = Field(800, ge=1, le=4800, description="Maximum width of the image")
    max_height: int = Field(600, ge=1, le=4800, description="Maximum height of the image")
