"""Outbound-call services for the aggregation proxy"""

from aqvision_api.services.upstream import UpstreamService
from aqvision_api.services.openaq import OpenAQService
from aqvision_api.services.openweather import OpenWeatherService
from aqvision_api.services.maps import MapsScriptService
from aqvision_api.services.ai.openai_adapter import OpenAIAdapter

__all__ = [
    "UpstreamService",
    "OpenAQService",
    "OpenWeatherService",
    "MapsScriptService",
    "OpenAIAdapter",
]
