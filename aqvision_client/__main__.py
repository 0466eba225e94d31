"""
Request one AI insight from a running AQ-Vision proxy

Usage:
    python -m aqvision_client summary --lat 12.9716 --lon 77.5946
"""

import argparse
import asyncio
import sys

from pydantic import ValidationError

from aqvision_client.insight_client import DEFAULT_LOCATION, InsightClient
from aqvision_client.prompts import InsightType
from aqvision_core.config import get_settings
from aqvision_core.logger import logger


async def main(argv=None, transport=None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate an AI air quality insight for a location"
    )
    parser.add_argument(
        "insight_type",
        choices=[t.value for t in InsightType],
        help="Kind of insight to generate"
    )
    parser.add_argument("--lat", type=float, default=DEFAULT_LOCATION.latitude, help="Latitude")
    parser.add_argument("--lon", type=float, default=DEFAULT_LOCATION.longitude, help="Longitude")
    parser.add_argument(
        "--proxy-url",
        type=str,
        default=None,
        help="Base URL of the AQ-Vision proxy (default: PROXY_BASE_URL)"
    )

    args = parser.parse_args(argv)

    settings = get_settings()
    if args.proxy_url:
        settings = settings.model_copy(update={"proxy_base_url": args.proxy_url})

    client = InsightClient.from_settings(settings, transport=transport)
    try:
        try:
            client.set_location(args.lat, args.lon)
        except ValidationError as e:
            logger.error(f"Invalid coordinates: {e}")
            return 1

        await client.request_insight(args.insight_type)
    finally:
        await client.aclose()

    print(client.panel.html)
    return 1 if client.panel.error else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
