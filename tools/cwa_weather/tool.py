"""Taiwan Central Weather Administration forecast and earthquake tools."""

import logging
from datetime import timedelta
from typing import Any, Dict

from langfuse import observe

from util.cache import get_cache_client
from util.config import CWASettings
from util.cwa import CWAClient, CWAError, extract_records, taipei_now
from util.envelope import error_response, success_response
from util.langfuse import tag_error
from util.time_range import InvalidInputError, ResolutionPolicy, align, resolve

from .input_model import (
    CityDatasetInput,
    EarthquakeInput,
    TownshipForecastInput,
    WeatherForecastInput,
)

logger = logging.getLogger(__name__)

CITY_FORECAST_DATASET = "F-C0032-001"
EARTHQUAKE_DATASET = "E-A0015-001"

FORECAST_ELEMENTS = ("Wx", "PoP", "MinT", "MaxT", "CI")
FORECAST_WINDOW = timedelta(hours=24)
EARTHQUAKE_WINDOW = timedelta(hours=36)

# "now" is snapped to this grid so repeated default queries share a cache key.
QUERY_GRANULARITY = timedelta(minutes=10)

TOWNSHIP_DATASETS = {
    "宜蘭縣": "F-D0047-001",
    "桃園市": "F-D0047-005",
    "新竹縣": "F-D0047-009",
    "苗栗縣": "F-D0047-013",
    "彰化縣": "F-D0047-017",
    "南投縣": "F-D0047-021",
    "雲林縣": "F-D0047-025",
    "嘉義縣": "F-D0047-029",
    "屏東縣": "F-D0047-033",
    "臺東縣": "F-D0047-037",
    "花蓮縣": "F-D0047-041",
    "澎湖縣": "F-D0047-045",
    "基隆市": "F-D0047-049",
    "新竹市": "F-D0047-053",
    "嘉義市": "F-D0047-057",
    "臺北市": "F-D0047-061",
    "高雄市": "F-D0047-065",
    "新北市": "F-D0047-069",
    "臺中市": "F-D0047-073",
    "臺南市": "F-D0047-077",
    "連江縣": "F-D0047-081",
    "金門縣": "F-D0047-085",
}

_client = None


def get_cwa_client() -> CWAClient:
    """Get the CWA client (lazy initialization, shared by all CWA tools)."""
    global _client
    if _client is None:
        _client = CWAClient(CWASettings.from_env(), cache=get_cache_client())
    return _client


def normalize_city_name(city_name: str) -> str:
    """Official county names are written with 臺; callers often type 台."""
    return city_name.strip().replace("台", "臺")


def _query_records(
    dataset_id: str, params: Dict[str, Any], time_from: str, time_to: str
) -> Dict[str, Any]:
    query = {**params, "timeFrom": time_from, "timeTo": time_to}
    try:
        records = extract_records(get_cwa_client().fetch_dataset(dataset_id, query))
    except CWAError as e:
        logger.error("CWA query for %s failed: %s", dataset_id, e)
        tag_error("cwa_error", str(e), dataset_id=dataset_id)
        return error_response(str(e), dataset_id=dataset_id)

    return success_response(
        dataset_id=dataset_id, time_from=time_from, time_to=time_to, records=records
    )


def _invalid_input(e: InvalidInputError, dataset_id: str) -> Dict[str, Any]:
    tag_error("invalid_input", str(e), reason=e.reason, dataset_id=dataset_id)
    return error_response(str(e), dataset_id=dataset_id)


@observe(name="get_weather_forecast")
def get_weather_forecast(params: WeatherForecastInput) -> Dict:
    """Get 36-hour weather forecast data for a city."""
    elements = params.element_name or list(FORECAST_ELEMENTS)
    unknown = [e for e in elements if e not in FORECAST_ELEMENTS]
    if unknown:
        return error_response(
            f"Unknown forecast element(s): {', '.join(unknown)}. "
            f"Valid elements: {', '.join(FORECAST_ELEMENTS)}",
            dataset_id=CITY_FORECAST_DATASET,
        )

    now = align(taipei_now(), QUERY_GRANULARITY)
    policy = ResolutionPolicy.looking_ahead(now, FORECAST_WINDOW)
    try:
        window = resolve(params.time_from, params.time_to, now, policy)
    except InvalidInputError as e:
        return _invalid_input(e, CITY_FORECAST_DATASET)

    time_from, time_to = window.format()
    return _query_records(
        CITY_FORECAST_DATASET,
        {
            "locationName": [params.location_name],
            "elementName": elements,
            "sort": "time",
        },
        time_from,
        time_to,
    )


@observe(name="get_earthquake_data")
def get_earthquake_data(params: EarthquakeInput) -> Dict:
    """Get the latest felt earthquake report for an area, within 36 hours by default."""
    # rounded up so the newest reports stay inside the window
    now = align(taipei_now(), QUERY_GRANULARITY, round_up=True)
    policy = ResolutionPolicy.looking_back(now, EARTHQUAKE_WINDOW)
    try:
        window = resolve(params.time_from, params.time_to, now, policy)
    except InvalidInputError as e:
        return _invalid_input(e, EARTHQUAKE_DATASET)

    time_from, time_to = window.format()
    return _query_records(
        EARTHQUAKE_DATASET,
        {"AreaName": [params.area_name], "limit": 1, "sort": "time"},
        time_from,
        time_to,
    )


def get_city_forecast_dataset_id(params: CityDatasetInput) -> Dict:
    """Map a city or county name to its township forecast dataset id."""
    city_name = normalize_city_name(params.city_name)
    dataset_id = TOWNSHIP_DATASETS.get(city_name)
    if dataset_id is None:
        return error_response(
            f"Unknown city or county '{params.city_name}'. "
            f"Known: {', '.join(TOWNSHIP_DATASETS)}",
            city_name=params.city_name,
        )
    return success_response(city_name=city_name, dataset_id=dataset_id)


@observe(name="get_township_weather_forecast")
def get_township_weather_forecast(params: TownshipForecastInput) -> Dict:
    """Get the township-level forecast from a city's township dataset."""
    dataset_id = params.location_id.strip().upper()
    if dataset_id not in TOWNSHIP_DATASETS.values():
        return error_response(
            f"Unknown township forecast dataset '{params.location_id}'. "
            "Use get_city_forecast_dataset_id to look it up.",
            dataset_id=params.location_id,
        )

    now = align(taipei_now(), QUERY_GRANULARITY)
    policy = ResolutionPolicy.looking_ahead(now, FORECAST_WINDOW, allow_end_only=False)
    try:
        window = resolve(params.time_from, params.time_to, now, policy)
    except InvalidInputError as e:
        return _invalid_input(e, dataset_id)

    time_from, time_to = window.format()
    return _query_records(
        dataset_id,
        {"locationName": [params.location_name], "sort": "time"},
        time_from,
        time_to,
    )
