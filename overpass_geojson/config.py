"""
Configuration settings for the Overpass to GeoJSON converter
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


# Public Overpass API instances
OVERPASS_ENDPOINTS: Dict[str, str] = {
    "Main": "https://overpass-api.de/api/interpreter",
    "MainAlt1": "https://lz4.overpass-api.de/api/interpreter",
    "MainAlt2": "https://z.overpass-api.de/api/interpreter",
    "Kumi": "https://overpass.kumi.systems/api/interpreter",
    "KumiAlt1": "https://bib.kumi.systems/api/interpreter",
    "KumiAlt2": "https://willard.kumi.systems/api/interpreter",
    "KumiAlt3": "https://dodonna.kumi.systems/api/interpreter",
    "France": "https://overpass.openstreetmap.fr/api/interpreter",
    "Switzerland": "https://overpass.osm.ch/api/interpreter",
    "Russia": "https://overpass.openstreetmap.ru/api/interpreter",
    "USMil": "https://osm-overpass.gs.mil/overpass/interpreter",
}


@dataclass
class RetryOptions:
    """Retry/backoff policy for Overpass requests"""
    max_retries: int = 3
    initial_delay: float = 1.0  # seconds
    max_delay: float = 10.0  # seconds
    backoff: float = 2.0


@dataclass
class APIConfig:
    """API endpoints and configuration"""
    # Key into OVERPASS_ENDPOINTS
    overpass_endpoint: str = "Main"
    overpass_timeout: int = 90

    # None = derive from the primary endpoint
    fallback_endpoints: Optional[List[str]] = None

    retry: RetryOptions = field(default_factory=RetryOptions)

    # Minimum spacing between consecutive requests (seconds)
    min_request_interval: float = 1.0

    # User agent for API requests
    user_agent: str = "overpass-geojson/1.0"


@dataclass
class ConverterConfig:
    """GeoJSON conversion defaults"""
    outer_clockwise: bool = True
    include_relations: bool = False
    parse_tags: bool = False


@dataclass
class Config:
    """Root configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    converter: ConverterConfig = field(default_factory=ConverterConfig)

    # Raw Overpass responses are cached here when set
    cache_dir: Optional[str] = None


# Global config instance
config = Config()


def get_config() -> Config:
    """Get global configuration"""
    return config


def validate_config(config: Config) -> None:
    """
    Validate that all configuration values are usable.
    Raises ValueError listing every problem found.
    """
    errors = []

    if config.api is None:
        errors.append("api configuration is required but not set")
    else:
        api = config.api
        if api.overpass_endpoint not in OVERPASS_ENDPOINTS and not api.overpass_endpoint.startswith("http"):
            errors.append(f"api.overpass_endpoint must be an endpoint key or URL, got {api.overpass_endpoint!r}")
        if api.overpass_timeout is None or api.overpass_timeout <= 0:
            errors.append(f"api.overpass_timeout must be positive, got {api.overpass_timeout}")
        if not api.user_agent:
            errors.append("api.user_agent is required but not set")
        if api.min_request_interval < 0:
            errors.append(f"api.min_request_interval must not be negative, got {api.min_request_interval}")
        for key in api.fallback_endpoints or []:
            if key not in OVERPASS_ENDPOINTS:
                errors.append(f"api.fallback_endpoints contains unknown endpoint {key!r}")

        retry = api.retry
        if retry.max_retries < 0:
            errors.append(f"api.retry.max_retries must not be negative, got {retry.max_retries}")
        if retry.initial_delay < 0:
            errors.append(f"api.retry.initial_delay must not be negative, got {retry.initial_delay}")
        if retry.backoff < 1:
            errors.append(f"api.retry.backoff must be at least 1, got {retry.backoff}")
        if retry.max_delay < retry.initial_delay:
            errors.append(
                f"api.retry.max_delay ({retry.max_delay}) must not be below initial_delay ({retry.initial_delay})"
            )

    if config.converter is None:
        errors.append("converter configuration is required but not set")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
