"""
Pydantic models for the GeoJSON output (RFC 7946 subset)
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field


# ============================================================
# GeoJSON Geometry Types
# ============================================================

class GeoJSONPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: List[float]  # [longitude, latitude]


class GeoJSONLineString(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]] = Field(min_length=2)  # [[lon, lat], ...]


class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[lon, lat], ...]]


class GeoJSONMultiPolygon(BaseModel):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: List[List[List[List[float]]]]


GeoJSONGeometry = Annotated[
    Union[GeoJSONPoint, GeoJSONLineString, GeoJSONPolygon, GeoJSONMultiPolygon],
    Field(discriminator="type"),
]


# ============================================================
# Features
# ============================================================

class GeoJSONFeature(BaseModel):
    type: Literal["Feature"] = "Feature"
    id: str  # "<type>/<id>"
    geometry: Optional[GeoJSONGeometry] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class GeoJSONFeatureCollection(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: List[GeoJSONFeature] = Field(default_factory=list)


def validate_feature_collection(geojson: Dict[str, Any]) -> GeoJSONFeatureCollection:
    """
    Validate a FeatureCollection dict

    Raises:
        pydantic.ValidationError: If the structure is not valid GeoJSON
    """
    return GeoJSONFeatureCollection.model_validate(geojson)
