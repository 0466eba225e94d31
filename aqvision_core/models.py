"""
Domain models shared by the proxy and the insight client

All models are request-scoped; nothing here is persisted.
"""

import math
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from aqvision_core.exceptions import IncompleteData


INCOMPLETE_DATA_MESSAGE = "Live data is incomplete for this location."


def to_finite_float(value: Any) -> Optional[float]:
    """
    Coerce a raw upstream value to a finite float

    Numbers and numeric strings are accepted; booleans, blanks, NaN and
    infinities are rejected (None).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def finite_values(values: Iterable[Any]) -> List[float]:
    """Keep only the values that coerce to finite floats, in order"""
    numeric = []
    for value in values:
        number = to_finite_float(value)
        if number is not None:
            numeric.append(number)
    return numeric


def mean_of_finite(values: Iterable[Any]) -> Optional[float]:
    """Arithmetic mean of the finite values; None when there are none"""
    numeric = finite_values(values)
    if not numeric:
        return None
    return math.fsum(numeric) / len(numeric)


def _as_text(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


class LocationQuery(BaseModel):
    """A point to look up; both coordinates finite and in range"""
    latitude: float = Field(..., ge=-90, le=90, allow_inf_nan=False)
    longitude: float = Field(..., ge=-180, le=180, allow_inf_nan=False)


class GroundMeasurement(BaseModel):
    """One ground-sensor reading as reported by OpenAQ"""
    value: Union[float, str, None] = None
    timestamp_local: Optional[str] = Field(default=None, alias="timestampLocal")
    unit: Optional[str] = None
    location_name: Optional[str] = Field(default=None, alias="locationName")

    class Config:
        populate_by_name = True

    @classmethod
    def from_openaq(cls, record: dict) -> "GroundMeasurement":
        """Shape an OpenAQ measurement record; odd field types are stringified"""
        value = record.get("value")
        # JSON bodies cannot carry NaN/Infinity back out
        if isinstance(value, float) and not math.isfinite(value):
            value = None
        elif value is not None and not isinstance(value, (int, float, str)):
            value = str(value)
        date = record.get("date")
        return cls(
            value=value,
            timestamp_local=_as_text(date.get("local")) if isinstance(date, dict) else None,
            unit=_as_text(record.get("unit")),
            location_name=_as_text(record.get("location")),
        )


class PollutionComponents(BaseModel):
    """Pollutant concentrations in µg/m³"""
    pm2_5: float
    pm10: float
    no2: float
    o3: float
    so2: float

    @classmethod
    def from_openweather(cls, payload: Any) -> "PollutionComponents":
        """
        Take the components of the first time-series element of an
        OpenWeather air-pollution payload

        Raises:
            IncompleteData: the list is empty or a component is missing
        """
        entries = payload.get("list") if isinstance(payload, dict) else None
        if not entries or not entries[0]:
            raise IncompleteData(INCOMPLETE_DATA_MESSAGE)

        components = entries[0].get("components") or {}
        try:
            return cls(**{name: components.get(name) for name in cls.model_fields})
        except ValidationError as e:
            missing = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise IncompleteData(INCOMPLETE_DATA_MESSAGE, details={"missing": missing}) from e


class WeatherSnapshot(BaseModel):
    """Current conditions at the queried location (metric units)"""
    location_name: str = Field(..., alias="locationName")
    country_code: Optional[str] = Field(default=None, alias="countryCode")
    condition_description: Optional[str] = Field(default=None, alias="conditionDescription")
    temp_c: Optional[float] = Field(default=None, alias="tempC")
    humidity_pct: Optional[float] = Field(default=None, alias="humidityPct")
    wind_speed: Optional[float] = Field(default=None, alias="windSpeed")
    wind_direction_deg: Optional[float] = Field(default=None, alias="windDirectionDeg")

    class Config:
        populate_by_name = True

    @classmethod
    def from_openweather(cls, payload: Any) -> "WeatherSnapshot":
        """
        Shape an OpenWeather current-weather payload

        Raises:
            IncompleteData: the payload has no location name
        """
        if not isinstance(payload, dict) or not payload.get("name"):
            raise IncompleteData(INCOMPLETE_DATA_MESSAGE)

        conditions = payload.get("weather") or [{}]
        main = payload.get("main") or {}
        wind = payload.get("wind") or {}
        return cls(
            location_name=payload["name"],
            country_code=(payload.get("sys") or {}).get("country"),
            condition_description=(conditions[0] or {}).get("description"),
            temp_c=to_finite_float(main.get("temp")),
            humidity_pct=to_finite_float(main.get("humidity")),
            wind_speed=to_finite_float(wind.get("speed")),
            wind_direction_deg=to_finite_float(wind.get("deg")),
        )


# Insight context: the exact structure serialized into the prompt

class ContextLocation(BaseModel):
    name: str
    country: Optional[str] = None


class ContextPollutants(BaseModel):
    pm2_5: str
    pm10: str
    no2: str
    o3: str
    so2: str


class ContextWeather(BaseModel):
    condition: str
    temp: str
    humidity: str
    wind: str


class InsightContext(BaseModel):
    """Live data handed to the language model"""
    location: ContextLocation
    ground_sensor_pm25: str
    main_pollutants_micrograms_per_cubic_meter: ContextPollutants
    weather: ContextWeather

    def serialize(self) -> str:
        """Compact JSON with non-ASCII characters kept as-is"""
        return self.model_dump_json()
