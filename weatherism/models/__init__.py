"""Models package exports."""

from weatherism.models.location import (
    AuthorizationState,
    LocationFailure,
    LocationFix,
    Placemark,
)
from weatherism.models.state import AppState
from weatherism.models.weather import (
    CurrentWeather,
    ForecastDay,
    GeocodingResult,
    WeatherCondition,
    WeatherResponse,
)

__all__ = [
    "AppState",
    "AuthorizationState",
    "CurrentWeather",
    "ForecastDay",
    "GeocodingResult",
    "LocationFailure",
    "LocationFix",
    "Placemark",
    "WeatherCondition",
    "WeatherResponse",
]
