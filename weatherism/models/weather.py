"""Weather data models."""

from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class WeatherCondition(str, Enum):
    """Broad weather condition used for theming."""

    CLEAR = "clear"
    PARTLY_CLOUDY = "partly_cloudy"
    CLOUDY = "cloudy"
    FOGGY = "foggy"
    DRIZZLE = "drizzle"
    RAINY = "rainy"
    SNOWY = "snowy"
    STORMY = "stormy"


class GeocodingResult(BaseModel):
    """A place resolved by the weather provider's geocoding API."""

    name: str = Field(..., description="Place name")
    country: str = Field("", description="Country name")
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")
    admin1: Optional[str] = Field(None, description="First-level administrative area")
    timezone: Optional[str] = Field(None, description="IANA timezone name")


class CurrentWeather(BaseModel):
    """Current weather conditions."""

    time: datetime = Field(..., description="Observation time")
    temperature: float = Field(..., description="Air temperature at 2m in Celsius")
    apparent_temperature: Optional[float] = Field(None, description="Feels like temperature in Celsius")
    relative_humidity: Optional[int] = Field(None, ge=0, le=100, description="Humidity percentage")
    wind_speed: Optional[float] = Field(None, ge=0, description="Wind speed at 10m in km/h")
    weather_code: int = Field(..., description="WMO weather interpretation code")
    is_day: bool = Field(True, description="Whether it is daytime")


class ForecastDay(BaseModel):
    """Weather forecast for a single day."""

    date: date_type = Field(..., description="Forecast date")
    weather_code: int = Field(..., description="WMO weather interpretation code")
    temperature_max: float = Field(..., description="High temperature in Celsius")
    temperature_min: float = Field(..., description="Low temperature in Celsius")
    precipitation_probability: Optional[int] = Field(
        None, ge=0, le=100, description="Precipitation probability percentage"
    )


class WeatherResponse(BaseModel):
    """Weather snapshot for a place: current conditions and daily forecast."""

    latitude: float = Field(..., description="Latitude of the forecast grid cell")
    longitude: float = Field(..., description="Longitude of the forecast grid cell")
    timezone: str = Field("GMT", description="Timezone of the returned times")
    current: CurrentWeather = Field(..., description="Current weather conditions")
    daily: list[ForecastDay] = Field(default_factory=list, description="Daily forecast")
