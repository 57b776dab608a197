"""Output models for the Google Places tools."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class PlacesSearchOutput(BaseModel):
    """Places found by a text or nearby search."""

    success: bool = Field(..., description="Whether the search succeeded")
    results: Optional[List[Dict[str, Any]]] = Field(
        None, description="Places with id, name, formatted_address, location and types"
    )
    total_results: Optional[int] = Field(None, description="Number of places returned")
    error: Optional[str] = Field(None, description="Error message if the search failed")

    class Config:
        """Pydantic configuration."""

        extra = "allow"
        json_schema_extra = {
            "examples": [
                {
                    "success": True,
                    "results": [
                        {
                            "id": "ChIJ2Y2p3k6pQjQRc7Vw9H0k0ZQ",
                            "name": "台北101",
                            "formatted_address": "110台灣台北市信義區信義路五段7號",
                            "location": {"latitude": 25.0339639, "longitude": 121.5644722},
                            "types": ["tourist_attraction"],
                        }
                    ],
                    "total_results": 1,
                }
            ]
        }


class AutocompleteOutput(BaseModel):
    success: bool = Field(..., description="Whether the request succeeded")
    suggestions: Optional[List[Dict[str, Any]]] = Field(
        None, description="Place predictions with place_id, text, matched_substrings and types"
    )
    total_suggestions: Optional[int] = Field(None, description="Number of suggestions")
    error: Optional[str] = Field(None, description="Error message if the request failed")

    class Config:
        """Pydantic configuration."""

        extra = "allow"


class PlaceDetailsOutput(BaseModel):
    success: bool = Field(..., description="Whether the request succeeded")
    place: Optional[Dict[str, Any]] = Field(
        None, description="Place resource with empty values removed"
    )
    error: Optional[str] = Field(None, description="Error message if the request failed")

    class Config:
        """Pydantic configuration."""

        extra = "allow"


class PlacePhotoOutput(BaseModel):
    success: bool = Field(..., description="Whether the request succeeded")
    name: Optional[str] = Field(None, description="Photo media resource name")
    photo_uri: Optional[str] = Field(None, description="Short-lived URI of the image")
    error: Optional[str] = Field(None, description="Error message if the request failed")

    class Config:
        """Pydantic configuration."""

        extra = "allow"


class FieldMaskOutput(BaseModel):
    success: bool = Field(..., description="Always true")
    fields: Dict[str, str] = Field(..., description="Field mask path to description")

    class Config:
        """Pydantic configuration."""

        extra = "allow"
