"""
Overpass API client

Handles communication with Overpass API including:
- Rate limiting
- Retry logic with exponential backoff
- Fallback endpoints
- Error classification
"""

import time
from typing import Any, Dict, List, Optional, Tuple

import requests
from loguru import logger

from ..config import OVERPASS_ENDPOINTS, RetryOptions, get_config, Config
from .errors import OverpassError, get_status_error
from .geojson import osm2geojson
from .tags import parse_element_tags


def default_fallbacks(primary: str) -> List[str]:
    """Fallback endpoint keys for a primary endpoint key"""
    if primary.startswith("Main"):
        return ["MainAlt1", "MainAlt2"]
    if primary.startswith("Kumi"):
        return ["KumiAlt1", "KumiAlt2", "KumiAlt3"]
    return ["Main", "Kumi", "France"]


def resolve_endpoint(endpoint: str) -> Tuple[str, str]:
    """
    Resolve an endpoint key or URL

    Returns:
        (key, url); URLs that are not in the endpoint table resolve to key 'Main'
    """
    if endpoint in OVERPASS_ENDPOINTS:
        return endpoint, OVERPASS_ENDPOINTS[endpoint]
    for key, url in OVERPASS_ENDPOINTS.items():
        if url == endpoint:
            return key, url
    return "Main", endpoint


class OverpassAPIClient:
    """Client for interacting with Overpass API"""

    def __init__(
        self,
        config: Optional[Config] = None,
        endpoint: Optional[str] = None,
        fallback_endpoints: Optional[List[str]] = None,
        retry: Optional[RetryOptions] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None
    ):
        self.config = config or get_config()
        api = self.config.api

        primary_key, self.endpoint = resolve_endpoint(endpoint or api.overpass_endpoint)
        # An explicit empty list disables fallbacks
        if fallback_endpoints is None:
            fallback_endpoints = api.fallback_endpoints
        if fallback_endpoints is None:
            fallback_endpoints = default_fallbacks(primary_key)
        self.fallback_endpoints = list(fallback_endpoints)
        self.retry = retry or api.retry
        self.user_agent = user_agent or api.user_agent
        self.timeout = timeout or api.overpass_timeout

        self._last_request_time = 0.0
        self._min_request_interval = api.min_request_interval

    def _rate_limit(self):
        """Ensure we don't exceed rate limits"""
        elapsed = time.time() - self._last_request_time
        if elapsed < self._min_request_interval:
            time.sleep(self._min_request_interval - elapsed)
        self._last_request_time = time.time()

    def _endpoint_url(self, index: int) -> str:
        if index == -1:
            return self.endpoint
        return OVERPASS_ENDPOINTS[self.fallback_endpoints[index]]

    def _next_endpoint(self, index: int, delay: float) -> Tuple[int, float]:
        """Move to the next fallback, or wait and go back to the primary endpoint"""
        if index < len(self.fallback_endpoints) - 1:
            index += 1
            logger.info(f"Switching to fallback endpoint: {self.fallback_endpoints[index]}")
            return index, delay

        logger.info(f"All endpoints attempted, waiting {delay}s before retry")
        time.sleep(delay)
        delay = min(delay * self.retry.backoff, self.retry.max_delay)
        return -1, delay

    def query(self, query: str) -> Dict[str, Any]:
        """
        Execute Overpass API query with retry logic

        Rate limit (429) and server (5xx) responses as well as connection
        failures are retried on the fallback endpoints, then on the
        primary endpoint after a backoff delay. Other statuses fail at once.

        Args:
            query: Overpass QL query string

        Returns:
            JSON response from Overpass API

        Raises:
            OverpassError: If the query fails or all retries are exhausted
        """
        headers = {
            "Accept": "*/*",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "User-Agent": self.user_agent,
        }

        max_retries = self.retry.max_retries
        delay = self.retry.initial_delay
        endpoint_index = -1

        for attempt in range(max_retries + 1):
            url = self._endpoint_url(endpoint_index)
            logger.debug(f"Attempt {attempt + 1}/{max_retries + 1}: querying {url}")
            self._rate_limit()

            try:
                response = requests.post(
                    url,
                    data={"data": query},
                    headers=headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                if attempt == max_retries:
                    logger.error(f"Overpass request failed after {max_retries + 1} attempts: {e}")
                    raise OverpassError(f"Request failed after {max_retries + 1} attempts: {e}") from e
                logger.warning(f"Overpass request failed (attempt {attempt + 1}): {e}")
                endpoint_index, delay = self._next_endpoint(endpoint_index, delay)
                continue

            if response.ok:
                try:
                    data = response.json()
                except ValueError as e:
                    raise OverpassError(f"Invalid JSON response from {url}") from e

                if isinstance(data, dict) and "remark" in data:
                    raise OverpassError(data["remark"])
                return data

            error = get_status_error(response.status_code, query, response.text)
            if (response.status_code == 429 or response.status_code >= 500) and attempt < max_retries:
                logger.warning(f"{error} (attempt {attempt + 1}/{max_retries + 1})")
                endpoint_index, delay = self._next_endpoint(endpoint_index, delay)
                continue

            logger.error(f"Overpass query failed: HTTP {response.status_code}")
            raise error

        raise OverpassError("Maximum retries exceeded")

    def query_geojson(
        self,
        query: str,
        parse_tags: bool = False,
        outer_clockwise: bool = True,
        include_relations: bool = False
    ) -> Dict[str, Any]:
        """
        Execute a query and convert the returned elements to GeoJSON

        Args:
            query: Overpass QL query string (must request JSON output)
            parse_tags: Coerce tag values to booleans/numbers first
            outer_clockwise: Winding of outer polygon rings
            include_relations: Keep relation memberships in the output properties

        Returns:
            FeatureCollection dict
        """
        data = self.query(query)
        elements = data.get("elements", [])
        if parse_tags:
            elements = [parse_element_tags(element) for element in elements]
        return osm2geojson(
            elements,
            outer_clockwise=outer_clockwise,
            include_relations=include_relations
        )
