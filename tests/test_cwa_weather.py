"""Tests for the CWA weather tools."""

from datetime import datetime, timedelta
from unittest.mock import Mock, patch

import pytest
import responses

from tools.cwa_weather.input_model import (
    CityDatasetInput,
    EarthquakeInput,
    TownshipForecastInput,
    WeatherForecastInput,
)
from tools.cwa_weather.tool import (
    TOWNSHIP_DATASETS,
    get_city_forecast_dataset_id,
    get_earthquake_data,
    get_township_weather_forecast,
    get_weather_forecast,
    normalize_city_name,
)
from util.cache import MemoryCache
from util.config import CWASettings
from util.cwa import CWAClient, CWAError

NOW = datetime(2025, 4, 10, 12, 0, 0)


@pytest.fixture
def cwa_client(mock_data):
    client = Mock()
    client.fetch_dataset.return_value = mock_data("cwa", "city_forecast")
    with (
        patch("tools.cwa_weather.tool.get_cwa_client", return_value=client),
        patch("tools.cwa_weather.tool.taipei_now", return_value=NOW),
        patch("tools.cwa_weather.tool.tag_error"),
    ):
        yield client


def query_params(client):
    return client.fetch_dataset.call_args[0][1]


class TestGetWeatherForecast:
    def test_default_window_is_next_24_hours(self, cwa_client):
        result = get_weather_forecast(WeatherForecastInput(location_name="臺北市"))

        assert result["success"] is True
        assert result["dataset_id"] == "F-C0032-001"
        assert result["time_from"] == "2025-04-10T12:00:00"
        assert result["time_to"] == "2025-04-11T12:00:00"
        assert result["records"]["location"][0]["locationName"] == "臺北市"

        dataset_id, params = cwa_client.fetch_dataset.call_args[0]
        assert dataset_id == "F-C0032-001"
        assert params["locationName"] == ["臺北市"]
        assert params["elementName"] == ["Wx", "PoP", "MinT", "MaxT", "CI"]
        assert params["timeFrom"] == "2025-04-10T12:00:00"

    def test_selected_elements_are_forwarded(self, cwa_client):
        get_weather_forecast(
            WeatherForecastInput(location_name="花蓮縣", element_name=["Wx", "PoP"])
        )

        assert query_params(cwa_client)["elementName"] == ["Wx", "PoP"]

    def test_unknown_element_is_rejected(self, cwa_client):
        result = get_weather_forecast(
            WeatherForecastInput(location_name="花蓮縣", element_name=["Temp"])
        )

        assert result["success"] is False
        assert "Temp" in result["error"]
        cwa_client.fetch_dataset.assert_not_called()

    def test_long_window_is_clamped(self, cwa_client):
        result = get_weather_forecast(
            WeatherForecastInput(
                location_name="臺北市",
                time_from="2025-04-11T00:00:00",
                time_to="2025-04-20T00:00:00",
            )
        )

        assert result["time_to"] == "2025-04-12T00:00:00"

    def test_start_near_calendar_limit_is_saturated(self, cwa_client):
        result = get_weather_forecast(
            WeatherForecastInput(location_name="臺北市", time_from="9999-12-31T12:00:00")
        )

        assert result["success"] is True
        assert result["time_from"] == "9999-12-31T12:00:00"
        assert result["time_to"] == "9999-12-31T23:59:59"

    def test_default_window_starts_on_ten_minute_grid(self, cwa_client):
        with patch(
            "tools.cwa_weather.tool.taipei_now", return_value=datetime(2025, 4, 10, 12, 7, 31)
        ):
            result = get_weather_forecast(WeatherForecastInput(location_name="臺北市"))

        assert result["time_from"] == "2025-04-10T12:00:00"
        assert result["time_to"] == "2025-04-11T12:00:00"

    def test_end_before_start_is_an_error_envelope(self, cwa_client):
        result = get_weather_forecast(
            WeatherForecastInput(
                location_name="臺北市",
                time_from="2025-04-02T00:00:00",
                time_to="2025-04-01T00:00:00",
            )
        )

        assert result["success"] is False
        assert "end precedes start" in result["error"]
        cwa_client.fetch_dataset.assert_not_called()

    def test_upstream_failure_is_an_error_envelope(self, cwa_client):
        cwa_client.fetch_dataset.side_effect = CWAError("Failed to fetch F-C0032-001 from CWA: 503")

        result = get_weather_forecast(WeatherForecastInput(location_name="臺北市"))

        assert result == {
            "success": False,
            "error": "Failed to fetch F-C0032-001 from CWA: 503",
            "dataset_id": "F-C0032-001",
        }

    def test_response_without_records_is_an_error_envelope(self, cwa_client):
        cwa_client.fetch_dataset.return_value = {"success": "false", "message": "bad key"}

        result = get_weather_forecast(WeatherForecastInput(location_name="臺北市"))

        assert result["success"] is False
        assert "bad key" in result["error"]


class TestGetEarthquakeData:
    def test_default_window_is_last_36_hours(self, cwa_client, mock_data):
        cwa_client.fetch_dataset.return_value = mock_data("cwa", "earthquake")

        result = get_earthquake_data(EarthquakeInput(area_name="花蓮縣"))

        assert result["success"] is True
        assert result["time_from"] == "2025-04-09T00:00:00"
        assert result["time_to"] == "2025-04-10T12:00:00"
        assert result["records"]["Earthquake"][0]["EarthquakeNo"] == 114097

        dataset_id, params = cwa_client.fetch_dataset.call_args[0]
        assert dataset_id == "E-A0015-001"
        assert params["AreaName"] == ["花蓮縣"]
        assert params["limit"] == 1

    def test_start_only_is_clamped_to_now(self, cwa_client):
        result = get_earthquake_data(
            EarthquakeInput(area_name="花蓮縣", time_from="2025-04-10T00:00:00")
        )

        assert result["time_from"] == "2025-04-10T00:00:00"
        assert result["time_to"] == "2025-04-10T12:00:00"

    def test_end_only_derives_start(self, cwa_client):
        result = get_earthquake_data(
            EarthquakeInput(area_name="花蓮縣", time_to="2025-02-01T12:00:00")
        )

        assert result["time_from"] == "2025-01-31T00:00:00"

    def test_unparseable_time_is_an_error_envelope(self, cwa_client):
        result = get_earthquake_data(
            EarthquakeInput(area_name="花蓮縣", time_from="2025-04-10 00:00:00")
        )

        assert result["success"] is False
        assert "unparseable timestamp" in result["error"]


class TestCityForecastDatasetId:
    def test_known_city(self):
        result = get_city_forecast_dataset_id(CityDatasetInput(city_name="臺北市"))

        assert result == {"success": True, "city_name": "臺北市", "dataset_id": "F-D0047-061"}

    def test_tai_variant_is_normalized(self):
        result = get_city_forecast_dataset_id(CityDatasetInput(city_name="台東縣"))

        assert result["dataset_id"] == "F-D0047-037"

    def test_unknown_city(self):
        result = get_city_forecast_dataset_id(CityDatasetInput(city_name="東京都"))

        assert result["success"] is False
        assert "宜蘭縣" in result["error"]

    def test_every_county_has_its_own_dataset(self):
        assert len(TOWNSHIP_DATASETS) == 22
        assert len(set(TOWNSHIP_DATASETS.values())) == 22

    def test_normalize_city_name(self):
        assert normalize_city_name(" 台中市 ") == "臺中市"


class TestTownshipForecast:
    def test_queries_township_dataset(self, cwa_client):
        result = get_township_weather_forecast(
            TownshipForecastInput(location_id="f-d0047-061", location_name="信義區")
        )

        assert result["success"] is True
        dataset_id, params = cwa_client.fetch_dataset.call_args[0]
        assert dataset_id == "F-D0047-061"
        assert params["locationName"] == ["信義區"]
        assert params["timeTo"] == "2025-04-11T12:00:00"

    def test_end_only_is_rejected(self, cwa_client):
        result = get_township_weather_forecast(
            TownshipForecastInput(
                location_id="F-D0047-061",
                location_name="信義區",
                time_to="2025-04-11T00:00:00",
            )
        )

        assert result["success"] is False
        assert "end provided without start is not allowed" in result["error"]
        cwa_client.fetch_dataset.assert_not_called()

    def test_unknown_dataset_is_rejected(self, cwa_client):
        result = get_township_weather_forecast(
            TownshipForecastInput(location_id="F-C0032-001", location_name="信義區")
        )

        assert result["success"] is False
        cwa_client.fetch_dataset.assert_not_called()


class TestDefaultWindowCaching:
    EARTHQUAKE_URL = "https://opendata.cwa.gov.tw/api/v1/rest/datastore/E-A0015-001"

    @responses.activate
    def test_calls_seconds_apart_share_one_upstream_request(self, mock_data):
        responses.add(responses.GET, self.EARTHQUAKE_URL, json=mock_data("cwa", "earthquake"))
        cache = MemoryCache()
        client = CWAClient(CWASettings(auth_key="test-key"), cache=cache)
        instants = [datetime(2025, 4, 10, 12, 0, 1) + timedelta(seconds=i) for i in range(5)]

        with (
            patch("tools.cwa_weather.tool.get_cwa_client", return_value=client),
            patch("tools.cwa_weather.tool.taipei_now", side_effect=instants),
        ):
            results = [get_earthquake_data(EarthquakeInput(area_name="花蓮縣")) for _ in instants]

        assert all(r["success"] for r in results)
        assert {r["time_to"] for r in results} == {"2025-04-10T12:10:00"}
        assert len(responses.calls) == 1
        assert len(cache) == 1
