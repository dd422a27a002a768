"""
OSM data caching

Handles caching of Overpass API responses to disk
"""

import os
import json
import hashlib
from typing import Dict, Any, Optional
from loguru import logger


class OSMCache:
    """Handles caching of raw Overpass responses to disk"""

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir

    def get_cache_path(self, query: str) -> Optional[str]:
        """Get cache file path for an Overpass query"""
        if not self.cache_dir:
            return None
        cache_hash = hashlib.md5(query.strip().encode("utf-8")).hexdigest()[:8]
        return os.path.join(self.cache_dir, f"overpass_{cache_hash}.json")

    def load(self, cache_path: Optional[str]) -> Optional[Dict[str, Any]]:
        """Load a response from cache if it exists"""
        if not cache_path or not os.path.exists(cache_path):
            return None
        try:
            with open(cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            logger.info(f"Loaded Overpass response from cache: {cache_path}")
            return data
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load cache {cache_path}: {e}")
        return None

    def save(self, cache_path: Optional[str], data: Dict[str, Any]):
        """Save a response to cache"""
        if not self.cache_dir or not cache_path:
            return
        try:
            os.makedirs(os.path.dirname(cache_path), exist_ok=True)
            with open(cache_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.info(f"Saved Overpass response to cache: {cache_path}")
        except OSError as e:
            logger.warning(f"Failed to save cache {cache_path}: {e}")
