"""
Base class for services that call third-party HTTP APIs

One shared httpx.AsyncClient is created by the application lifespan and
handed to every service together with the resolved Settings. No retries:
a failed call surfaces immediately as UpstreamFailure.
"""

from typing import Any, Dict, Optional

import httpx

from aqvision_core.config import Settings
from aqvision_core.exceptions import UpstreamFailure
from aqvision_core.logger import logger


class UpstreamService:
    """Common outbound-call handling for one provider"""

    provider: str = "upstream"

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self.client = client
        self.settings = settings
        self.log = logger.bind(context="upstream", provider=self.provider)

    async def send(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None
    ) -> httpx.Response:
        """
        Send one request, converting transport errors to UpstreamFailure

        Credentials may travel in the query string, so only host and path
        are logged.
        """
        try:
            response = await self.client.request(
                method, url, params=params, headers=headers, json=json
            )
        except httpx.TimeoutException as e:
            self.log.error(f"{self.provider} request timeout: {e!r}")
            raise UpstreamFailure(
                f"{self.provider} request timed out", status_code=504, provider=self.provider
            ) from e
        except httpx.RequestError as e:
            self.log.error(f"{self.provider} unreachable: {e!r}")
            raise UpstreamFailure(
                f"{self.provider} is unreachable", status_code=502, provider=self.provider
            ) from e

        self.log.info(
            f"{method} {response.request.url.host}{response.request.url.path} -> {response.status_code}"
        )
        return response

    async def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        failure_message: Optional[str] = None
    ) -> Any:
        """
        GET a JSON document

        Raises:
            UpstreamFailure: non-success status (same status code, generic
                message) or a body that is not JSON (502)
        """
        response = await self.send("GET", url, params=params, headers=headers)

        if not response.is_success:
            self.log.warning(
                f"{self.provider} HTTP error: {response.status_code} - {response.text[:200]}"
            )
            raise UpstreamFailure(
                failure_message or f"{self.provider} fetch failed",
                status_code=response.status_code,
                provider=self.provider,
            )

        try:
            return response.json()
        except ValueError as e:
            self.log.error(f"{self.provider} returned a non-JSON body")
            raise UpstreamFailure(
                f"{self.provider} returned an invalid response",
                status_code=502,
                provider=self.provider,
            ) from e
