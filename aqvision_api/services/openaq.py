"""
Ground-sensor PM2.5 measurements from OpenAQ

Queries the measurements endpoint over an explicit time window around a
point and aggregates the readings to a mean of the finite values only.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from aqvision_api.schemas import GroundMeasurementsResponse
from aqvision_api.services.upstream import UpstreamService
from aqvision_core.models import (
    GroundMeasurement,
    LocationQuery,
    finite_values,
    mean_of_finite,
)


def isoformat_utc(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a Z suffix"""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class OpenAQService(UpstreamService):
    """Fetches and aggregates PM2.5 readings near a location"""

    provider = "openaq"

    def build_params(
        self,
        location: LocationQuery,
        radius: int,
        days: int,
        now: Optional[datetime] = None
    ) -> dict:
        """Query parameters for the window [now - days, now]"""
        date_to = now or datetime.now(timezone.utc)
        date_from = date_to - timedelta(days=days)
        return {
            "parameter": "pm25",
            "coordinates": f"{location.latitude},{location.longitude}",
            "radius": str(radius),
            "date_from": isoformat_utc(date_from),
            "date_to": isoformat_utc(date_to),
            "limit": str(self.settings.openaq_limit),
            "sort": "desc",
        }

    async def fetch_measurements(
        self,
        location: LocationQuery,
        radius: Optional[int] = None,
        days: Optional[int] = None
    ) -> GroundMeasurementsResponse:
        """
        Fetch ground measurements and compute their mean

        An empty result set is valid and yields ``mean=None``.

        Raises:
            UpstreamFailure: OpenAQ answered with a non-success status
        """
        radius = radius or self.settings.openaq_default_radius
        days = days or self.settings.openaq_default_days

        headers = {"accept": "application/json"}
        if self.settings.openaq_api_key:
            headers["X-API-Key"] = self.settings.openaq_api_key

        payload = await self.get_json(
            self.settings.openaq_measurements_url,
            params=self.build_params(location, radius, days),
            headers=headers,
            failure_message="OpenAQ fetch failed",
        )

        if not isinstance(payload, dict):
            payload = {}
        results = payload.get("results")
        if not isinstance(results, list):
            results = []
        raw = [GroundMeasurement.from_openaq(record) for record in results if isinstance(record, dict)]
        readings = [record.get("value") for record in results if isinstance(record, dict)]

        values = finite_values(readings)
        mean = mean_of_finite(values)
        self.log.info(f"OpenAQ returned {len(raw)} readings, {len(values)} numeric, mean={mean}")

        return GroundMeasurementsResponse(
            mean=mean,
            values=values,
            raw=raw,
            meta=payload.get("meta"),
        )
