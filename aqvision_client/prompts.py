"""
Prompt assembly for AI insights

Live data is merged into an InsightContext, serialized verbatim and
followed by one canned instruction picked by insight type.
"""

from enum import Enum
from typing import Any, Dict, Optional, Union

from aqvision_core.exceptions import UnknownInsightType
from aqvision_core.models import (
    ContextLocation,
    ContextPollutants,
    ContextWeather,
    InsightContext,
    PollutionComponents,
    WeatherSnapshot,
    to_finite_float,
)


PROMPT_PREAMBLE = (
    "Context: You are an AI air quality expert. Analyze the following real-time data "
    "and respond to the user's request. Be clear and helpful. Do not repeat the input "
    "data in your response."
)

NOT_AVAILABLE = "N/A"


class InsightType(str, Enum):
    """The insight variants offered by the dashboard"""
    SUMMARY = "summary"
    HEALTH = "health"
    ACTION = "action"
    CIGARETTE = "cigarette"
    SCHOOL = "school"
    MASK = "mask"

    @classmethod
    def parse(cls, value: Union[str, "InsightType"]) -> "InsightType":
        """
        Resolve a raw insight type

        Raises:
            UnknownInsightType: value is not one of the variants
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownInsightType(value) from None

    @property
    def heading(self) -> str:
        return self.value[:1].upper() + self.value[1:]


INSTRUCTIONS: Dict[InsightType, str] = {
    InsightType.SUMMARY: (
        "Provide a concise 1-2 sentence summary of the current air quality based on this data."
    ),
    InsightType.HEALTH: (
        "As a public health advisor, provide 2-3 bullet points with actionable health "
        "recommendations for the general public and sensitive groups."
    ),
    InsightType.ACTION: (
        "Provide a simple, 3-point personal action plan someone can take today to reduce "
        "their exposure to this pollution."
    ),
    InsightType.CIGARETTE: (
        "Based on the ground sensor PM2.5 value, calculate the cigarette equivalent. Explain "
        "the result simply, stating it's a rule-of-thumb comparison where ~22 µg/m³ is like "
        "smoking 1 cigarette per day. If sensor data is N/A, say so."
    ),
    InsightType.SCHOOL: (
        "Act as a school nurse. Based on the data, provide a clear 'Yes', 'Caution', or 'No' "
        "for outdoor playtime for school children. Briefly explain why in simple terms."
    ),
    InsightType.MASK: (
        "Provide a specific mask recommendation (e.g., 'No mask needed', 'Consider an N95/FFP2 "
        "mask') and give advice on outdoor activity levels based on the PM2.5 value."
    ),
}

_missing = set(InsightType) - set(INSTRUCTIONS)
if _missing:
    raise RuntimeError(f"No instruction for insight types: {sorted(t.value for t in _missing)}")


def instruction_for(insight_type: Union[str, InsightType]) -> str:
    return INSTRUCTIONS[InsightType.parse(insight_type)]


def format_number(value: Optional[float]) -> str:
    """Plain number text: whole numbers without a decimal point"""
    if value is None:
        return NOT_AVAILABLE
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_ground_pm25(mean: Optional[float]) -> str:
    if mean is None:
        return NOT_AVAILABLE
    return f"{mean:.2f} µg/m³"


def format_wind(weather: WeatherSnapshot) -> str:
    if weather.wind_speed is None:
        return NOT_AVAILABLE
    if weather.wind_direction_deg is None:
        return f"{format_number(weather.wind_speed)} m/s"
    return f"{format_number(weather.wind_speed)} m/s from {format_number(weather.wind_direction_deg)}°"


def build_insight_context(
    ground_mean: Optional[float],
    pollution: PollutionComponents,
    weather: WeatherSnapshot
) -> InsightContext:
    """Merge the three live-data sources into the prompt context"""
    return InsightContext(
        location=ContextLocation(name=weather.location_name, country=weather.country_code),
        ground_sensor_pm25=format_ground_pm25(ground_mean),
        main_pollutants_micrograms_per_cubic_meter=ContextPollutants(
            pm2_5=f"{pollution.pm2_5:.2f}",
            pm10=f"{pollution.pm10:.2f}",
            no2=f"{pollution.no2:.2f}",
            o3=f"{pollution.o3:.2f}",
            so2=f"{pollution.so2:.2f}",
        ),
        weather=ContextWeather(
            condition=weather.condition_description or NOT_AVAILABLE,
            temp=f"{format_number(weather.temp_c)}°C" if weather.temp_c is not None else NOT_AVAILABLE,
            humidity=f"{format_number(weather.humidity_pct)}%" if weather.humidity_pct is not None else NOT_AVAILABLE,
            wind=format_wind(weather),
        ),
    )


def context_from_payloads(ground: Any, pollution: Any, weather: Any) -> InsightContext:
    """
    Build the context from raw proxy responses

    Raises:
        IncompleteData: pollution has no time-series element or weather has
            no location name
    """
    ground_mean = to_finite_float(ground.get("mean")) if isinstance(ground, dict) else None
    return build_insight_context(
        ground_mean,
        PollutionComponents.from_openweather(pollution),
        WeatherSnapshot.from_openweather(weather),
    )


def build_prompt(context: InsightContext, insight_type: Union[str, InsightType]) -> str:
    """Preamble, serialized live data and the selected instruction"""
    return (
        f"{PROMPT_PREAMBLE} Live Data: {context.serialize()} "
        f"User Request: {instruction_for(insight_type)}"
    )
