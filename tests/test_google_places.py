"""Tests for the Google Places tools."""

import json
from unittest.mock import patch

import pytest
import responses

from tools.google_places import tool as places
from tools.google_places.input_model import (
    AutocompleteInput,
    NearbyPlacesInput,
    PlaceDetailsInput,
    PlacePhotoInput,
    SearchPlacesInput,
)
from util.config import GooglePlacesSettings
from util.places import GooglePlacesClient

BASE_URL = "https://places.googleapis.com/v1"


@pytest.fixture
def tag_error():
    """Route the tools to a real client with a test key and capture error tags."""
    client = GooglePlacesClient(GooglePlacesSettings(api_key="test-maps-key"))
    with (
        patch("tools.google_places.tool.get_places_client", return_value=client),
        patch("tools.google_places.tool.tag_error") as mock_tag,
    ):
        yield mock_tag


def sent_body(call_index=0):
    return json.loads(responses.calls[call_index].request.body)


class TestHelpers:
    def test_parse_price_levels(self):
        assert places.parse_price_levels("moderate, Expensive,LUXURY") == [
            "PRICE_LEVEL_MODERATE",
            "PRICE_LEVEL_EXPENSIVE",
        ]
        assert places.parse_price_levels(None) == []

    def test_split_fields(self):
        assert places.split_fields(" id, rating ,") == ["id", "rating"]
        assert places.split_fields(" , ") is None
        assert places.split_fields("") is None

    def test_place_summary_drops_unspecified_price_level(self, mock_data):
        first, second = mock_data("places", "search_text")["places"]

        assert places.place_summary(first) == {
            "id": "ChIJ2Y2p3k6pQjQRc7Vw9H0k0ZQ",
            "name": "台北101",
            "formatted_address": "110台灣台北市信義區信義路五段7號",
            "location": {"latitude": 25.0339639, "longitude": 121.5644722},
            "types": ["tourist_attraction", "point_of_interest"],
            "rating": 4.6,
        }
        assert places.place_summary(second)["price_level"] == "PRICE_LEVEL_MODERATE"
        assert "rating" not in places.place_summary(second)

    def test_drop_empty_keeps_false(self):
        assert places.drop_empty(
            {"a": None, "b": "", "c": [], "d": {}, "e": False, "f": "x", "g": 0}
        ) == {"e": False, "f": "x"}


class TestSearchPlaces:
    @responses.activate
    def test_search_places(self, tag_error, mock_data):
        responses.post(f"{BASE_URL}/places:searchText", json=mock_data("places", "search_text"))

        result = places.search_places(
            SearchPlacesInput(
                query="台北101",
                latitude=25.03,
                longitude=121.56,
                radius=1000,
                min_rating=4,
                price_levels="moderate,unknown",
                fields="id,rating",
            )
        )

        assert result["success"] is True
        assert result["total_results"] == 2
        assert result["results"][1]["name"] == "鼎泰豐 信義店"
        body = sent_body()
        assert body["textQuery"] == "台北101"
        assert body["languageCode"] == "zh-TW"
        assert body["maxResultCount"] == 20
        assert body["locationBias"] == {
            "circle": {"center": {"latitude": 25.03, "longitude": 121.56}, "radius": 1000.0}
        }
        assert body["minRating"] == 4
        assert body["priceLevels"] == ["PRICE_LEVEL_MODERATE"]
        assert "openNow" not in body
        assert responses.calls[0].request.headers["X-Goog-FieldMask"] == "places.id,places.rating"

    @responses.activate
    def test_location_bias_needs_both_coordinates(self, tag_error):
        responses.post(f"{BASE_URL}/places:searchText", json={})

        result = places.search_places(SearchPlacesInput(query="coffee", latitude=25.03))

        assert result == {"success": True, "results": [], "total_results": 0}
        assert "locationBias" not in sent_body()

    @responses.activate
    def test_api_error_becomes_envelope(self, tag_error):
        responses.post(f"{BASE_URL}/places:searchText", status=403, json={"error": {}})

        result = places.search_places(SearchPlacesInput(query="coffee"))

        assert result["success"] is False
        assert result["query"] == "coffee"
        tag_error.assert_called_once()

    def test_missing_api_key(self):
        client = GooglePlacesClient(GooglePlacesSettings(api_key=None))
        with (
            patch("tools.google_places.tool.get_places_client", return_value=client),
            patch("tools.google_places.tool.tag_error"),
        ):
            result = places.search_places(SearchPlacesInput(query="coffee"))

        assert result["success"] is False
        assert "GOOGLE_MAPS_API_KEY" in result["error"]


class TestNearbyPlaces:
    @pytest.mark.parametrize("rank, expected", [("distance", "DISTANCE"), ("nearest", None)])
    @responses.activate
    def test_rank_preference(self, tag_error, rank, expected):
        responses.post(f"{BASE_URL}/places:searchNearby", json={"places": []})

        result = places.get_nearby_places(
            NearbyPlacesInput(
                latitude=25.03,
                longitude=121.56,
                included_primary_type="restaurant",
                rank_preference=rank,
            )
        )

        assert result["success"] is True
        body = sent_body()
        assert body["locationRestriction"]["circle"]["radius"] == 500.0
        assert body["includedPrimaryTypes"] == ["restaurant"]
        assert body.get("rankPreference") == expected

    @responses.activate
    def test_failure_reports_location(self, tag_error):
        responses.post(f"{BASE_URL}/places:searchNearby", status=500)

        result = places.get_nearby_places(NearbyPlacesInput(latitude=25.03, longitude=121.56))

        assert result["success"] is False
        assert result["location"] == "(25.03,121.56)"
        assert result["radius"] == 500.0


class TestAutocomplete:
    @responses.activate
    def test_query_predictions_are_skipped(self, tag_error, mock_data):
        responses.post(f"{BASE_URL}/places:autocomplete", json=mock_data("places", "autocomplete"))

        result = places.get_place_autocomplete(
            AutocompleteInput(input="台北101", latitude=25.03, longitude=121.56)
        )

        assert result["total_suggestions"] == 1
        assert result["suggestions"][0] == {
            "place_id": "ChIJ2Y2p3k6pQjQRc7Vw9H0k0ZQ",
            "text": "台北101, 信義路五段, 信義區台北市",
            "matched_substrings": [{"start": 0, "end": 4}],
            "types": ["tourist_attraction"],
        }
        assert sent_body()["locationBias"]["circle"]["radius"] == 500.0
        assert "X-Goog-FieldMask" not in responses.calls[0].request.headers


class TestDetailsAndPhotos:
    @responses.activate
    def test_details_drop_empty_values(self, tag_error):
        responses.get(
            f"{BASE_URL}/places/ChIJ-abc",
            json={
                "id": "ChIJ-abc",
                "displayName": {"text": "鼎泰豐"},
                "photos": [],
                "websiteUri": "",
                "takeout": False,
            },
        )

        result = places.get_place_details(PlaceDetailsInput(place_id="ChIJ-abc", region_code="TW"))

        assert result["place"] == {
            "id": "ChIJ-abc",
            "displayName": {"text": "鼎泰豐"},
            "takeout": False,
        }
        request = responses.calls[0].request
        assert "languageCode=zh-TW" in request.url
        assert "regionCode=TW" in request.url

    @responses.activate
    def test_details_not_found(self, tag_error):
        responses.get(f"{BASE_URL}/places/ghost", status=404)

        result = places.get_place_details(PlaceDetailsInput(place_id="ghost"))

        assert result["success"] is False
        assert result["place_id"] == "ghost"

    @responses.activate
    def test_photo(self, tag_error):
        photo = "places/ChIJ-abc/photos/AbC"
        responses.get(
            f"{BASE_URL}/{photo}/media",
            json={"name": f"{photo}/media", "photoUri": "https://lh3.googleusercontent.com/p/x"},
        )

        result = places.get_place_photo(PlacePhotoInput(photo_name=photo, max_width=400))

        assert result == {
            "success": True,
            "name": f"{photo}/media",
            "photo_uri": "https://lh3.googleusercontent.com/p/x",
        }
        url = responses.calls[0].request.url
        assert "maxWidthPx=400" in url
        assert "maxHeightPx=600" in url
        assert "skipHttpRedirect=true" in url


def test_field_mask_description():
    result = places.get_field_mask_description()

    assert result["success"] is True
    assert result["fields"]["reviews"] == "Reviews"
    assert "priceLevel" in result["fields"]
