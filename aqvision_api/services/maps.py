"""
Google Maps JavaScript loader proxy

The key stays on the server: the browser loads ``/maps`` and receives the
script that was fetched with the key injected.
"""

from aqvision_api.services.upstream import UpstreamService
from aqvision_core.exceptions import ServerMisconfigured, UpstreamFailure


class MapsScriptService(UpstreamService):
    provider = "google_maps"

    async def fetch_script(self) -> str:
        """
        Fetch the Maps JS loader

        Raises:
            ServerMisconfigured: no Google Maps key configured
            UpstreamFailure: Google answered with a non-success status
        """
        if not self.settings.google_maps_api_key:
            raise ServerMisconfigured("GOOGLE_MAPS_API_KEY is not configured on the server.")

        response = await self.send(
            "GET",
            self.settings.google_maps_script_url,
            params={
                "key": self.settings.google_maps_api_key,
                "libraries": self.settings.google_maps_libraries,
                "v": "weekly",
            },
        )
        if not response.is_success:
            self.log.warning(f"Google Maps loader HTTP error: {response.status_code}")
            raise UpstreamFailure(
                "Failed to load Google Maps", status_code=500, provider=self.provider
            )
        return response.text
