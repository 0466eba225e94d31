"""
Insight Client

Collects live data from the aggregation proxy, builds one prompt and asks
the proxy's completion endpoint for an insight.

Flow for ``request_insight``:
1. Single-flight guard on the client's RequestState
2. Concurrent fetch of ground, pollution and weather data (structured join)
3. Required branches (pollution, weather) fail the flow; ground degrades
   to ``mean = None``
4. Context + instruction -> prompt -> ``POST /api/openai``
5. Render into the panel; the guard is always released
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, List, Optional, Union

import httpx

from aqvision_client.prompts import InsightType, build_prompt, context_from_payloads
from aqvision_client.render import InsightPanel
from aqvision_core.config import Settings
from aqvision_core.exceptions import AQVisionError, UpstreamFailure
from aqvision_core.logger import logger
from aqvision_core.models import InsightContext, LocationQuery


ESSENTIAL_DATA_MESSAGE = "Could not fetch essential live data from servers."

# Bengaluru
DEFAULT_LOCATION = LocationQuery(latitude=12.9716, longitude=77.5946)


@dataclass
class RequestState:
    """Mutable per-client state: current location and the in-flight flag"""
    location: LocationQuery = field(default_factory=lambda: DEFAULT_LOCATION)
    in_flight: bool = False

    def acquire(self) -> bool:
        """Take the single-flight guard; False if a request is already running"""
        if self.in_flight:
            return False
        self.in_flight = True
        return True

    def release(self):
        self.in_flight = False


@dataclass
class Branch:
    """One leg of a fan-out"""
    name: str
    call: Awaitable[Any]
    required: bool = True
    default: Any = None


@dataclass
class BranchResult:
    name: str
    required: bool
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def join_branches(branches: List[Branch]) -> Dict[str, BranchResult]:
    """
    Run all branches concurrently and wait for every one to settle

    A failed branch yields its default value and keeps the error; nothing
    is cancelled when one branch fails.
    """
    outcomes = await asyncio.gather(*(branch.call for branch in branches), return_exceptions=True)

    results = {}
    for branch, outcome in zip(branches, outcomes):
        if isinstance(outcome, Exception):
            results[branch.name] = BranchResult(
                branch.name, branch.required, value=branch.default, error=outcome
            )
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results[branch.name] = BranchResult(branch.name, branch.required, value=outcome)
    return results


def raise_for_required(results: Dict[str, BranchResult], message: str = ESSENTIAL_DATA_MESSAGE):
    """
    Raises:
        UpstreamFailure: a required branch failed; per-branch errors in details
    """
    failed = {name: result for name, result in results.items() if result.required and not result.ok}
    if failed:
        raise UpstreamFailure(
            message,
            details={name: str(result.error) for name, result in failed.items()},
        )


def ai_error_message(response: httpx.Response) -> str:
    """Most specific message available from a failed completion response"""
    try:
        body = response.json()
    except ValueError:
        return f"AI server error: {response.reason_phrase}. Response: {response.text}"

    if isinstance(body, dict):
        details = body.get("details")
        if isinstance(details, dict) and isinstance(details.get("error"), dict):
            message = details["error"].get("message")
            if message:
                return message
        if body.get("error"):
            return str(body["error"])
    return f"AI server error: {response.reason_phrase}"


class InsightClient:
    """
    Client for AI insights over the aggregation proxy

    Args:
        http: AsyncClient whose base_url points at the proxy
        panel: Display region (a fresh InsightPanel by default)
        state: Request state; owns the location and the single-flight guard
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        panel: Optional[InsightPanel] = None,
        state: Optional[RequestState] = None
    ):
        self.http = http
        self.panel = panel or InsightPanel()
        self.state = state or RequestState()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ) -> "InsightClient":
        http = httpx.AsyncClient(
            base_url=settings.proxy_base_url,
            timeout=httpx.Timeout(settings.api_request_timeout, connect=10.0),
            transport=transport,
        )
        return cls(http, **kwargs)

    def set_location(self, latitude: float, longitude: float):
        """Move the client to a new point (validated)"""
        self.state.location = LocationQuery(latitude=latitude, longitude=longitude)

    async def _get_json(self, path: str, location: LocationQuery) -> Any:
        response = await self.http.get(
            path, params={"lat": location.latitude, "lon": location.longitude}
        )
        if not response.is_success:
            raise UpstreamFailure(
                f"{path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()

    async def fetch_live_data(self, location: LocationQuery) -> Dict[str, BranchResult]:
        """Concurrent ground/pollution/weather fetch; required branches enforced"""
        results = await join_branches([
            Branch("ground", self._get_json("/api/openaq", location), required=False, default={"mean": None}),
            Branch("pollution", self._get_json("/api/ow-air", location)),
            Branch("weather", self._get_json("/api/openweather", location)),
        ])

        ground = results["ground"]
        if not ground.ok:
            logger.warning(f"Ground measurements unavailable, continuing without: {ground.error}")
        raise_for_required(results)
        return results

    async def build_context(self, location: LocationQuery) -> InsightContext:
        """
        Raises:
            UpstreamFailure: pollution or weather fetch failed
            IncompleteData: pollution or weather payload lacks required data
        """
        results = await self.fetch_live_data(location)
        return context_from_payloads(
            results["ground"].value,
            results["pollution"].value,
            results["weather"].value,
        )

    async def generate(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        """POST the prompt to the proxy's completion endpoint"""
        body = {"prompt": prompt}
        if system_instruction:
            body["systemInstruction"] = system_instruction

        response = await self.http.post("/api/openai", json=body)
        if not response.is_success:
            raise UpstreamFailure(ai_error_message(response), status_code=response.status_code)

        result = response.json()
        return (result.get("text") if isinstance(result, dict) else None) or ""

    async def request_insight(self, insight_type: Union[str, InsightType]) -> None:
        """
        Generate one insight and render it into the panel

        Returns immediately when a request is already in flight. Failures are
        rendered as a single error message, never raised.
        """
        state = self.state
        if not state.acquire():
            logger.debug(f"Insight request '{insight_type}' ignored, another is in flight")
            return

        self.panel.show_loading()
        try:
            kind = InsightType.parse(insight_type)
            context = await self.build_context(state.location)
            text = await self.generate(build_prompt(context, kind))
            self.panel.show_insight(kind, text)
            logger.info(f"Rendered '{kind.value}' insight for {context.location.name}")
        except AQVisionError as e:
            logger.warning(f"Insight request failed: {e.message}")
            self.panel.show_error(e.message)
        except httpx.HTTPError as e:
            logger.error(f"Proxy request failed: {e!r}")
            self.panel.show_error(str(e) or e.__class__.__name__)
        except Exception as e:
            logger.exception(f"Unexpected error generating insight: {e}")
            self.panel.show_error(str(e) or e.__class__.__name__)
        finally:
            state.release()

    async def aclose(self):
        """Close HTTP client"""
        await self.http.aclose()
