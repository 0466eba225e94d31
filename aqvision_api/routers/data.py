"""
Live Data Router

Ground-sensor, weather and air-pollution lookups for one location. Each
endpoint is stateless; upstream failures keep the upstream status code.
"""

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query

from aqvision_api.dependencies import (
    get_openaq_service,
    get_openweather_service,
    location_query,
)
from aqvision_api.schemas import ErrorResponse, GroundMeasurementsResponse
from aqvision_api.services import OpenAQService, OpenWeatherService
from aqvision_core.models import LocationQuery

router = APIRouter(prefix="/api", tags=["Live Data"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "lat/lon missing or invalid"},
    502: {"model": ErrorResponse, "description": "Upstream provider unreachable"},
}


@router.get("/openaq", response_model=GroundMeasurementsResponse, responses=ERROR_RESPONSES)
async def get_ground_measurements(
    location: LocationQuery = Depends(location_query),
    radius: Optional[int] = Query(default=None, ge=1, le=25000, description="Search radius in meters (default 5000)"),
    days: Optional[int] = Query(default=None, ge=1, le=30, description="Lookback window in days (default 1)"),
    service: OpenAQService = Depends(get_openaq_service),
):
    """
    Aggregated PM2.5 from OpenAQ ground sensors

    Returns the mean of the numeric readings (``null`` when there are none),
    the numeric values, the raw readings and OpenAQ's ``meta`` block.
    """
    return await service.fetch_measurements(location, radius=radius, days=days)


@router.get("/openweather", responses=ERROR_RESPONSES)
async def get_weather(
    location: LocationQuery = Depends(location_query),
    service: OpenWeatherService = Depends(get_openweather_service),
) -> Any:
    """Current weather conditions from OpenWeather (passthrough)"""
    return await service.fetch_weather(location)


@router.get("/ow-air", responses=ERROR_RESPONSES)
async def get_air_pollution(
    location: LocationQuery = Depends(location_query),
    service: OpenWeatherService = Depends(get_openweather_service),
) -> Any:
    """Air-pollution components from OpenWeather (passthrough)"""
    return await service.fetch_air_pollution(location)
