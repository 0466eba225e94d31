"""
Map Router

Serves the Google Maps loader through the proxy and the synthetic pollution
grid drawn on top of it.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from aqvision_api.dependencies import get_maps_service, location_query
from aqvision_api.schemas import DemoGridResponse
from aqvision_api.services import MapsScriptService
from aqvision_api.services.demo_grid import generate_demo_grid
from aqvision_core.exceptions import AQVisionError
from aqvision_core.logger import logger
from aqvision_core.models import LocationQuery

router = APIRouter(tags=["Map"])


@router.get("/maps", include_in_schema=False)
async def maps_script(service: MapsScriptService = Depends(get_maps_service)):
    """Google Maps JS with the server-held key injected"""
    try:
        script = await service.fetch_script()
    except AQVisionError as e:
        logger.error(f"Error loading Google Maps: {e.message}")
        return PlainTextResponse(e.message, status_code=500)

    return Response(content=script, media_type="application/javascript")


@router.get("/api/demo/grid", response_model=DemoGridResponse)
async def demo_grid(location: LocationQuery = Depends(location_query)):
    """
    Synthetic pollution zones around a location (mock data)

    A 20x20 grid over a 0.4 degree box; each zone carries an AQI value and
    its colour bucket.
    """
    return generate_demo_grid(location)
