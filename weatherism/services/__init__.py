"""Services package exports."""

from weatherism.services.geocoding_service import NominatimReverseGeocoder, ReverseGeocoder
from weatherism.services.location_service import (
    IPLocationProvider,
    LocationDelegate,
    LocationProvider,
)
from weatherism.services.logging_service import configure_logging, get_logger
from weatherism.services.weather_service import OpenMeteoWeatherService, WeatherFetcher

__all__ = [
    "IPLocationProvider",
    "LocationDelegate",
    "LocationProvider",
    "NominatimReverseGeocoder",
    "OpenMeteoWeatherService",
    "ReverseGeocoder",
    "WeatherFetcher",
    "configure_logging",
    "get_logger",
]
