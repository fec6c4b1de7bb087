"""Coordinators package exports."""

from weatherism.coordinators.location_coordinator import LocationCoordinator
from weatherism.coordinators.observable import Published, Subscription
from weatherism.coordinators.weather_coordinator import WeatherCoordinator

__all__ = [
    "LocationCoordinator",
    "Published",
    "Subscription",
    "WeatherCoordinator",
]
