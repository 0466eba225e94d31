"""
Pydantic schemas for API request/response validation
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from aqvision_core.models import GroundMeasurement


# Ground Measurement Schemas
class GroundMeasurementsResponse(BaseModel):
    """Aggregated PM2.5 ground-sensor readings around a location"""
    mean: Optional[float] = None
    values: List[float] = Field(default_factory=list)
    raw: List[GroundMeasurement] = Field(default_factory=list)
    meta: Optional[Any] = None


# Language Model Schemas
class InsightRequest(BaseModel):
    """Prompt forwarded to the chat-completion endpoint"""
    prompt: Optional[str] = None
    system_instruction: Optional[str] = Field(default=None, alias="systemInstruction")

    class Config:
        populate_by_name = True


class InsightResponse(BaseModel):
    """Generated text"""
    text: str


# Error Schema
class ErrorResponse(BaseModel):
    """Error body returned by every endpoint"""
    error: str
    details: Optional[Any] = None


# Demo Grid Schemas
class DemoZoneProperties(BaseModel):
    aqi: int
    zone: str
    category: str
    color: str


class DemoZoneGeometry(BaseModel):
    type: str = "Polygon"
    coordinates: List[List[List[float]]]


class DemoZone(BaseModel):
    type: str = "Feature"
    properties: DemoZoneProperties
    geometry: DemoZoneGeometry


class DemoReference(BaseModel):
    """Mock readings derived from the grid's middle zone"""
    pm25: float
    us_epa_aqi: int
    mock: bool = True


class DemoGridResponse(BaseModel):
    """GeoJSON FeatureCollection of synthetic pollution zones"""
    type: str = "FeatureCollection"
    features: List[DemoZone]
    reference: DemoReference


# Health Check Response
class HealthResponse(BaseModel):
    """API health check response"""
    status: str
    version: str
    environment: str
    credentials: Dict[str, bool]
