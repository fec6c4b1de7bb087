"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

import pytest

# Keep tests independent of any local .env
os.environ.setdefault("WEATHERISM_LOG_LEVEL", "DEBUG")

from tests.helpers import FakeGeocoder, FakeLocationProvider, FakeWeatherService
from weatherism.coordinators.location_coordinator import LocationCoordinator
from weatherism.coordinators.weather_coordinator import WeatherCoordinator


@pytest.fixture
def provider() -> FakeLocationProvider:
    return FakeLocationProvider()


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def weather_service() -> FakeWeatherService:
    return FakeWeatherService()


@pytest.fixture
async def location(provider) -> AsyncGenerator[LocationCoordinator, None]:
    coordinator = LocationCoordinator(provider)
    yield coordinator
    coordinator.close()


@pytest.fixture
async def coordinator(location, weather_service, geocoder) -> AsyncGenerator[WeatherCoordinator, None]:
    weather = WeatherCoordinator(location, weather_service, geocoder)
    yield weather
    await weather.close()
