"""
Demo Pollution Grid

Synthetic square zones around a centre point for the dashboard map. The
grid shape is deterministic; the AQI values carry random noise and have no
measurement meaning.
"""

import math
import random
from typing import Dict, List, Optional

from aqvision_core.models import LocationQuery


# (upper bound inclusive, category); anything above the last bound is hazardous
AQI_BUCKETS = [
    (50, "good"),
    (100, "moderate"),
    (150, "unhealthy_sensitive"),
    (200, "unhealthy"),
    (300, "very_unhealthy"),
]

AQI_COLORS = {
    "good": "#4ade80",
    "moderate": "#facc15",
    "unhealthy_sensitive": "#fb923c",
    "unhealthy": "#f87171",
    "very_unhealthy": "#c084fc",
    "hazardous": "#a16207",
}

DEMO_ZONES = ["Industrial Area", "City Center", "Residential North", "Greenbelt South", "Tech Park East"]

GRID_POINTS = 20
BOX_SIZE = 0.4  # degrees

PM25_PER_AQI = 0.35
EPA_AQI_PER_PM25 = 2.5


def aqi_category(aqi: float) -> str:
    """Colour bucket name for an AQI value"""
    for upper, category in AQI_BUCKETS:
        if aqi <= upper:
            return category
    return "hazardous"


def aqi_color(aqi: float) -> str:
    return AQI_COLORS[aqi_category(aqi)]


def generate_demo_grid(
    center: LocationQuery,
    num_points: int = GRID_POINTS,
    box_size: float = BOX_SIZE,
    rng: Optional[random.Random] = None
) -> Dict:
    """
    Build a GeoJSON FeatureCollection of ``num_points`` x ``num_points``
    zones covering a ``box_size`` degree square centred on ``center``

    AQI rises from west to east and is clamped to [10, 350].
    """
    rng = rng or random.Random()
    step = box_size / num_points
    features: List[Dict] = []

    for i in range(num_points):
        for j in range(num_points):
            lng = center.longitude - box_size / 2 + j * step
            lat = center.latitude - box_size / 2 + i * step
            base_aqi = 50 + math.sin(i * 0.5) * 20 + math.cos(j * 0.3) * 30 + rng.random() * 20
            aqi = int(round(max(10, min(350, base_aqi + (lng - center.longitude) * 200))))
            category = aqi_category(aqi)
            features.append({
                "type": "Feature",
                "properties": {
                    "aqi": aqi,
                    "zone": DEMO_ZONES[(i * num_points + j) % len(DEMO_ZONES)],
                    "category": category,
                    "color": AQI_COLORS[category],
                },
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[
                        [lng, lat],
                        [lng + step, lat],
                        [lng + step, lat + step],
                        [lng, lat + step],
                        [lng, lat],
                    ]],
                },
            })

    middle = features[len(features) // 2]["properties"]["aqi"]
    pm25 = round(middle * PM25_PER_AQI, 1)
    return {
        "type": "FeatureCollection",
        "features": features,
        "reference": {
            "pm25": pm25,
            "us_epa_aqi": int(round(middle * PM25_PER_AQI * EPA_AQI_PER_PM25)),
            "mock": True,
        },
    }
