"""Central Weather Administration (CWA) open data API client."""

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import requests

from util.cache import CacheClient
from util.config import CWASettings

logger = logging.getLogger(__name__)

TAIPEI = ZoneInfo("Asia/Taipei")

DATASTORE_PATH = "/v1/rest/datastore"


class CWAError(Exception):
    """Raised when a CWA API request fails."""


def taipei_now() -> datetime:
    """Current Taiwan local time as a naive, second-precision datetime."""
    return datetime.now(TAIPEI).replace(tzinfo=None, microsecond=0)


def check_success(response: dict[str, Any]) -> None:
    """Raise CWAError when the payload carries success: "false"."""
    if str(response.get("success", "true")).lower() == "false":
        raise CWAError(f"CWA API reported failure: {response.get('message', response)}")


def extract_records(response: dict[str, Any]) -> dict[str, Any]:
    """
    Extract the "records" sub-tree from a datastore response.

    Raises:
        CWAError: If the API reported failure or returned no records.
    """
    check_success(response)

    records = response.get("records")
    if records is None:
        raise CWAError("CWA response did not contain 'records'")
    return records


class CWAClient:
    """Thin client over the CWA datastore endpoints."""

    def __init__(self, settings: CWASettings, cache: CacheClient | None = None):
        self.settings = settings
        self.cache = cache

    def fetch_dataset(self, dataset_id: str, params: dict[str, Any]) -> dict[str, Any]:
        """
        Fetch a dataset from the CWA datastore.

        Args:
            dataset_id: Dataset identifier (e.g., F-C0032-001).
            params: Query parameters; list values are sent as repeated keys.

        Returns:
            The decoded JSON response.

        Raises:
            CWAError: If no authorization key is configured or the request fails.
        """
        if not self.settings.auth_key:
            raise CWAError("CWA authorization key is not configured (set CWA_AUTH_KEY)")

        if self.cache is None:
            return self._request(dataset_id, params)
        return self.cache.get_or_fetch(
            f"cwa:{dataset_id}",
            params,
            lambda: self._request(dataset_id, params),
            ttl=self.settings.cache_ttl,
        )

    def _request(self, dataset_id: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.settings.base_url}{DATASTORE_PATH}/{dataset_id}"
        query = {"Authorization": self.settings.auth_key, **params}
        logger.debug("Fetching CWA dataset %s", dataset_id)

        try:
            response = requests.get(url, params=query, timeout=self.settings.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise CWAError(f"Failed to fetch {dataset_id} from CWA: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise CWAError(f"CWA returned invalid JSON for {dataset_id}: {e}") from e

        if not isinstance(data, dict):
            raise CWAError(f"CWA returned an unexpected payload for {dataset_id}")
        # failures must raise here, before the response can be cached
        check_success(data)
        return data
