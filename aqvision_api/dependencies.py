"""
FastAPI dependencies

Services are built once in the application lifespan and stored on
``app.state``; routes receive them through these providers.
"""

from typing import Optional

from fastapi import Query, Request
from pydantic import ValidationError

from aqvision_api.services import MapsScriptService, OpenAIAdapter, OpenAQService, OpenWeatherService
from aqvision_core.exceptions import InvalidRequest
from aqvision_core.models import LocationQuery


def location_query(
    lat: Optional[str] = Query(default=None, description="Latitude in decimal degrees"),
    lon: Optional[str] = Query(default=None, description="Longitude in decimal degrees"),
) -> LocationQuery:
    """
    Required ``lat``/``lon`` query parameters

    Raises:
        InvalidRequest: either is missing, blank, non-finite or out of range
    """
    if not lat or not lon or not lat.strip() or not lon.strip():
        raise InvalidRequest("lat,lon required")
    try:
        return LocationQuery(latitude=lat, longitude=lon)
    except ValidationError as e:
        problems = [f"{err['loc'][-1]}: {err['msg']}" for err in e.errors()]
        raise InvalidRequest("lat,lon invalid", details=problems) from e


def get_openaq_service(request: Request) -> OpenAQService:
    return request.app.state.openaq_service


def get_openweather_service(request: Request) -> OpenWeatherService:
    return request.app.state.openweather_service


def get_openai_adapter(request: Request) -> OpenAIAdapter:
    return request.app.state.openai_adapter


def get_maps_service(request: Request) -> MapsScriptService:
    return request.app.state.maps_service
