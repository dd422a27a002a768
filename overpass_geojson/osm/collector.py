"""
Main OSM Collector

Orchestrates fetching, caching and GeoJSON conversion
"""

from typing import Dict, Any, Optional
from loguru import logger

from .api_client import OverpassAPIClient
from .cache import OSMCache
from .geojson import osm2geojson
from .tags import parse_element_tags
from ..config import Config, get_config


class OSMCollector:
    """
    Collect data from OpenStreetMap via Overpass API

    Raw responses are cached to disk when a cache directory is set, so the
    same query can be converted again without hitting the API.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        cache_dir: Optional[str] = None,
        api_client: Optional[OverpassAPIClient] = None
    ):
        self.config = config or get_config()
        self.api_client = api_client or OverpassAPIClient(config=self.config)
        self.cache = OSMCache(cache_dir or self.config.cache_dir)

    def fetch(self, query: str) -> Dict[str, Any]:
        """
        Fetch the raw Overpass response for a query

        Args:
            query: Overpass QL query string

        Returns:
            Overpass response (from cache when available)
        """
        cache_path = self.cache.get_cache_path(query)
        cached_data = self.cache.load(cache_path)
        if cached_data is not None:
            return cached_data

        data = self.api_client.query(query)
        logger.info(f"Fetched {len(data.get('elements', []))} elements from Overpass")
        self.cache.save(cache_path, data)
        return data

    def fetch_geojson(
        self,
        query: str,
        parse_tags: Optional[bool] = None,
        outer_clockwise: Optional[bool] = None,
        include_relations: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Fetch a query and convert the returned elements to GeoJSON

        Unset options fall back to the converter configuration.
        """
        data = self.fetch(query)
        return self.convert(
            data,
            parse_tags=parse_tags,
            outer_clockwise=outer_clockwise,
            include_relations=include_relations
        )

    def convert(
        self,
        data: Dict[str, Any],
        parse_tags: Optional[bool] = None,
        outer_clockwise: Optional[bool] = None,
        include_relations: Optional[bool] = None
    ) -> Dict[str, Any]:
        """Convert an Overpass response to a FeatureCollection"""
        converter = self.config.converter
        if parse_tags is None:
            parse_tags = converter.parse_tags
        if outer_clockwise is None:
            outer_clockwise = converter.outer_clockwise
        if include_relations is None:
            include_relations = converter.include_relations

        elements = data.get("elements", [])
        if parse_tags:
            elements = [parse_element_tags(element) for element in elements]

        geojson = osm2geojson(
            elements,
            outer_clockwise=outer_clockwise,
            include_relations=include_relations
        )
        logger.info(f"Converted {len(elements)} elements into {len(geojson['features'])} features")
        return geojson
