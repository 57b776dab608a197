"""Google Maps Places (New) search, details and photo tools."""

import logging
from typing import Any, Dict, List, Optional

from langfuse import observe

from util.config import GooglePlacesSettings
from util.envelope import error_response, success_response
from util.langfuse import tag_error
from util.places import GooglePlacesClient, PlacesError, circle

from .input_model import (
    AutocompleteInput,
    NearbyPlacesInput,
    PlaceDetailsInput,
    PlacePhotoInput,
    SearchPlacesInput,
)

logger = logging.getLogger(__name__)

PRICE_LEVELS = ("FREE", "INEXPENSIVE", "MODERATE", "EXPENSIVE", "VERY_EXPENSIVE")
RANK_PREFERENCES = ("DISTANCE", "POPULARITY")

FIELD_DESCRIPTIONS = {
    # Essentials (IDs only)
    "attributions": "Attribution Information",
    "id": "Place's Unique Identifier",
    "name": "Place Resource Name, format: places/PLACE_ID",
    "photos": "Collection of Place Photos",
    # Essentials
    "addressComponents": "Structured Address Components",
    "adrFormatAddress": "Formatted Address",
    "formattedAddress": "Complete Address as Single Line",
    "location": "Geographic Coordinates (Lat/Lng)",
    "shortFormattedAddress": "Short Format Address",
    "viewport": "Suggested Viewing Area",
    # Pro
    "accessibilityOptions": "Accessibility Facility Options",
    "businessStatus": "Business Operation Status",
    "displayName": "Place Display Name",
    "googleMapsLinks": "Google Maps Links (Pre-release)",
    "googleMapsUri": "Google Maps URI",
    # Enterprise
    "nationalPhoneNumber": "National Phone Number",
    "priceLevel": "Price Level",
    "priceRange": "Price Range",
    "rating": "Rating Score",
    "regularOpeningHours": "Regular Business Hours",
    "regularSecondaryOpeningHours": "Secondary Regular Business Hours",
    "userRatingCount": "Number of User Ratings",
    "websiteUri": "Website URI",
    # Enterprise + Atmosphere
    "allowsDogs": "Dogs Allowed",
    "dineIn": "Dine-in Service Available",
    "editorialSummary": "Editorial Summary",
    "goodForChildren": "Child-friendly",
    "goodForGroups": "Group-friendly",
    "menuForChildren": "Children's Menu Available",
    "parkingOptions": "Parking Options",
    "outdoorSeating": "Outdoor Seating Available",
    "reservable": "Accepts Reservations",
    "restroom": "Restroom Available",
    "reviews": "Reviews",
    "routingSummaries": "Route Summaries (Text/Nearby Search Only)",
    "servesBreakfast": "Serves Breakfast",
    "servesBrunch": "Serves Brunch",
    "servesCoffee": "Serves Coffee",
    "servesDessert": "Serves Dessert",
    "servesDinner": "Serves Dinner",
    "servesLunch": "Serves Lunch",
    "servesVegetarianFood": "Serves Vegetarian Food",
    "takeout": "Takeout Available",
}

_client = None


def get_places_client() -> GooglePlacesClient:
    """Get the Places client (lazy initialization)."""
    global _client
    if _client is None:
        _client = GooglePlacesClient(GooglePlacesSettings.from_env())
    return _client


def split_fields(fields: Optional[str]) -> Optional[List[str]]:
    if not fields:
        return None
    return [f.strip() for f in fields.split(",") if f.strip()] or None


def parse_price_levels(price_levels: Optional[str]) -> List[str]:
    """Map names like "moderate" to PRICE_LEVEL_MODERATE; unknown names are ignored."""
    if not price_levels:
        return []
    names = (level.strip().upper() for level in price_levels.split(","))
    return [f"PRICE_LEVEL_{name}" for name in names if name in PRICE_LEVELS]


def place_summary(place: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a Place resource to the fields callers use most; absent ones are left out."""
    summary = {
        "id": place.get("id"),
        "name": (place.get("displayName") or {}).get("text"),
        "formatted_address": place.get("formattedAddress"),
        "location": place.get("location"),
        "types": place.get("types"),
        "rating": place.get("rating") or None,
        "price_level": place.get("priceLevel"),
    }
    if summary["price_level"] == "PRICE_LEVEL_UNSPECIFIED":
        summary["price_level"] = None
    return {k: v for k, v in summary.items() if v is not None}


def drop_empty(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v not in (None, "", 0, {}, []) or v is False}


def _failure(action: str, e: PlacesError, **context) -> Dict:
    logger.error("Places %s failed: %s", action, e)
    tag_error("places_error", str(e), action=action)
    return error_response(str(e), **context)


def _search_results(response: Dict[str, Any]) -> Dict:
    results = [place_summary(p) for p in response.get("places", [])]
    return success_response(results=results, total_results=len(results))


@observe(name="places_search_places")
def search_places(params: SearchPlacesInput) -> Dict:
    """Search places by free text, optionally biased towards a location."""
    body: Dict[str, Any] = {
        "textQuery": params.query,
        "languageCode": params.language,
        "maxResultCount": params.max_results,
    }
    if params.latitude is not None and params.longitude is not None:
        body["locationBias"] = circle(params.latitude, params.longitude, params.radius)
    if params.open_now is not None:
        body["openNow"] = params.open_now
    if params.included_type:
        body["includedType"] = params.included_type
    if params.min_rating is not None:
        body["minRating"] = params.min_rating
    price_levels = parse_price_levels(params.price_levels)
    if price_levels:
        body["priceLevels"] = price_levels

    try:
        response = get_places_client().search_text(body, split_fields(params.fields))
    except PlacesError as e:
        return _failure("text search", e, query=params.query)
    return _search_results(response)


@observe(name="places_get_nearby_places")
def get_nearby_places(params: NearbyPlacesInput) -> Dict:
    body: Dict[str, Any] = {
        "languageCode": params.language,
        "maxResultCount": params.max_results,
        "locationRestriction": circle(params.latitude, params.longitude, params.radius),
    }
    if params.included_primary_type:
        body["includedPrimaryTypes"] = [params.included_primary_type]
    rank = (params.rank_preference or "").upper()
    if rank in RANK_PREFERENCES:
        body["rankPreference"] = rank

    try:
        response = get_places_client().search_nearby(body, split_fields(params.fields))
    except PlacesError as e:
        return _failure(
            "nearby search",
            e,
            location=f"({params.latitude},{params.longitude})",
            radius=params.radius,
        )
    return _search_results(response)


@observe(name="places_get_place_autocomplete")
def get_place_autocomplete(params: AutocompleteInput) -> Dict:
    body: Dict[str, Any] = {"input": params.input, "languageCode": params.language}
    if params.latitude is not None and params.longitude is not None:
        body["locationBias"] = circle(
            params.latitude, params.longitude, params.radius or 500.0
        )
    if params.included_primary_type:
        body["includedPrimaryTypes"] = [params.included_primary_type]

    try:
        response = get_places_client().autocomplete(body)
    except PlacesError as e:
        return _failure("autocomplete", e, input=params.input)

    suggestions = []
    for suggestion in response.get("suggestions", []):
        prediction = suggestion.get("placePrediction")
        if not prediction:
            continue
        text = prediction.get("text", {})
        suggestions.append(
            {
                "place_id": prediction.get("placeId"),
                "text": text.get("text"),
                "matched_substrings": [
                    {"start": m.get("startOffset", 0), "end": m.get("endOffset")}
                    for m in text.get("matches", [])
                ],
                "types": prediction.get("types", []),
            }
        )
    return success_response(suggestions=suggestions, total_suggestions=len(suggestions))


@observe(name="places_get_place_details")
def get_place_details(params: PlaceDetailsInput) -> Dict:
    try:
        place = get_places_client().get_place(
            params.place_id, params.language, params.region_code
        )
    except PlacesError as e:
        return _failure("place details", e, place_id=params.place_id)
    return success_response(place=drop_empty(place))


def get_place_photo(params: PlacePhotoInput) -> Dict:
    try:
        media = get_places_client().get_photo_media(
            params.photo_name, params.max_width, params.max_height
        )
    except PlacesError as e:
        return _failure("photo lookup", e, photo_name=params.photo_name)
    return success_response(name=media.get("name"), photo_uri=media.get("photoUri") or None)


def get_field_mask_description() -> Dict:
    """Describe the field mask paths accepted by the search and details tools."""
    return success_response(fields=FIELD_DESCRIPTIONS)
