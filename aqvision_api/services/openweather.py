"""
OpenWeather current conditions and air-pollution components

Both calls are passthroughs: the upstream JSON is returned unmodified and
shaped later by the insight client.
"""

from typing import Any

from aqvision_api.services.upstream import UpstreamService
from aqvision_core.models import LocationQuery


class OpenWeatherService(UpstreamService):
    """Passthrough proxy for the OpenWeather 2.5 API"""

    provider = "openweather"

    def _params(self, location: LocationQuery, **extra) -> dict:
        params = {"lat": location.latitude, "lon": location.longitude}
        params.update(extra)
        if self.settings.openweather_api_key:
            params["appid"] = self.settings.openweather_api_key
        return params

    async def fetch_weather(self, location: LocationQuery) -> Any:
        """Current weather in metric units"""
        return await self.get_json(
            f"{self.settings.openweather_base_url}/weather",
            params=self._params(location, units=self.settings.openweather_units),
            failure_message="OpenWeather fetch failed",
        )

    async def fetch_air_pollution(self, location: LocationQuery) -> Any:
        """Air-pollution time series; components live in ``list[0].components``"""
        return await self.get_json(
            f"{self.settings.openweather_base_url}/air_pollution",
            params=self._params(location),
            failure_message="OpenWeather Air Pollution fetch failed",
        )
