"""Google Places API (New) REST client."""

import logging
from typing import Any, Optional, Sequence

import requests

from util.config import GooglePlacesSettings

logger = logging.getLogger(__name__)

DEFAULT_FIELDS = ("id", "displayName", "formattedAddress", "location", "types")
DETAIL_FIELDS = (
    "id",
    "nationalPhoneNumber",
    "internationalPhoneNumber",
    "formattedAddress",
    "location",
    "googleMapsUri",
    "regularOpeningHours",
    "userRatingCount",
    "displayName",
    "reviews",
    "photos",
    "googleMapsLinks",
)
SEARCH_PREFIX = "places."


class PlacesError(Exception):
    """Raised when a Places API request fails."""


def format_field_mask(
    fields: Optional[Sequence[str]] = None, for_search: bool = True
) -> str:
    """
    Build the X-Goog-FieldMask header value.

    Search endpoints return a list under "places", so their field paths are
    prefixed with "places."; details requests take the bare paths.
    """
    paths = [f.strip() for f in fields or DEFAULT_FIELDS if f.strip()] or list(DEFAULT_FIELDS)
    if for_search:
        paths = [p if p.startswith(SEARCH_PREFIX) else SEARCH_PREFIX + p for p in paths]
    return ",".join(paths)


def circle(latitude: float, longitude: float, radius: float) -> dict[str, Any]:
    return {
        "circle": {
            "center": {"latitude": latitude, "longitude": longitude},
            "radius": radius,
        }
    }


class GooglePlacesClient:
    """Calls the Places API (New) endpoints with an API key."""

    def __init__(self, settings: GooglePlacesSettings):
        self.settings = settings

    def _headers(self, field_mask: Optional[str]) -> dict[str, str]:
        if not self.settings.api_key:
            raise PlacesError("Google Maps API key is not configured (set GOOGLE_MAPS_API_KEY)")
        headers = {"X-Goog-Api-Key": self.settings.api_key}
        if field_mask:
            headers["X-Goog-FieldMask"] = field_mask
        return headers

    def _request(
        self,
        method: str,
        path: str,
        field_mask: Optional[str] = None,
        **kwargs,
    ) -> dict[str, Any]:
        url = f"{self.settings.base_url}/{path}"
        headers = self._headers(field_mask)
        logger.debug("Places %s %s", method, path)
        try:
            response = requests.request(
                method, url, headers=headers, timeout=self.settings.timeout, **kwargs
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise PlacesError(f"Places API request to {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise PlacesError(f"Places API returned invalid JSON for {path}: {e}") from e

    def search_text(self, body: dict[str, Any], fields: Optional[Sequence[str]] = None):
        return self._request(
            "POST", "places:searchText", format_field_mask(fields), json=body
        )

    def search_nearby(self, body: dict[str, Any], fields: Optional[Sequence[str]] = None):
        return self._request(
            "POST", "places:searchNearby", format_field_mask(fields), json=body
        )

    def autocomplete(self, body: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "places:autocomplete", json=body)

    def get_place(
        self,
        place_id: str,
        language: str,
        region_code: Optional[str] = None,
        fields: Sequence[str] = DETAIL_FIELDS,
    ) -> dict[str, Any]:
        params = {"languageCode": language}
        if region_code:
            params["regionCode"] = region_code
        return self._request(
            "GET",
            f"places/{place_id}",
            format_field_mask(fields, for_search=False),
            params=params,
        )

    def get_photo_media(self, photo_name: str, max_width: int, max_height: int):
        """Resolve a photo resource name to its media URI without following the redirect."""
        return self._request(
            "GET",
            f"{photo_name}/media",
            params={
                "maxWidthPx": max_width,
                "maxHeightPx": max_height,
                "skipHttpRedirect": "true",
            },
        )
