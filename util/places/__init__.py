"""Google Places API utilities."""

from util.places.client import (
    DEFAULT_FIELDS,
    GooglePlacesClient,
    PlacesError,
    circle,
    format_field_mask,
)

__all__ = [
    "DEFAULT_FIELDS",
    "GooglePlacesClient",
    "PlacesError",
    "circle",
    "format_field_mask",
]
