"""Fakes and builders shared by the test suite."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

from weatherism.exceptions import WeatherFetchFailedError
from weatherism.models.location import AuthorizationState, LocationFix, Placemark
from weatherism.models.weather import CurrentWeather, GeocodingResult, WeatherResponse


def make_weather(code: int = 0, temperature: float = 20.0) -> WeatherResponse:
    """Build a minimal weather snapshot."""
    return WeatherResponse(
        latitude=52.52,
        longitude=13.41,
        timezone="Europe/Berlin",
        current=CurrentWeather(
            time=datetime(2025, 8, 5, 12, 0, tzinfo=timezone.utc),
            temperature=temperature,
            apparent_temperature=temperature - 1,
            relative_humidity=60,
            wind_speed=12.0,
            weather_code=code,
        ),
    )


def make_place(name: str = "Berlin", country: str = "Germany") -> GeocodingResult:
    """Build a resolved place."""
    return GeocodingResult(name=name, country=country, latitude=52.52, longitude=13.41)


class FakeLocationProvider:
    """Scriptable stand-in for the device location subsystem."""

    def __init__(self, status=AuthorizationState.UNDETERMINED):
        self.status = status
        self.delegate = None
        self.authorization_requests = 0
        self.fix_requests = 0

    @property
    def authorization_status(self):
        return self.status

    def set_delegate(self, delegate) -> None:
        self.delegate = delegate

    def request_authorization(self) -> None:
        self.authorization_requests += 1

    def request_one_time_fix(self) -> None:
        self.fix_requests += 1

    # Simulated OS notifications

    def change_authorization(self, status) -> None:
        self.status = status
        self.delegate.on_authorization_changed(status)

    def deliver(self, *fixes: LocationFix) -> None:
        self.delegate.on_fix_received(list(fixes))

    def fail(self, error: Exception) -> None:
        self.delegate.on_failure(error)


class FakeGeocoder:
    """Reverse geocoder returning canned placemarks."""

    def __init__(self, placemarks: Optional[list[Placemark]] = None, error: Optional[Exception] = None):
        self.placemarks = placemarks if placemarks is not None else [Placemark(locality="Berlin")]
        self.error = error
        self.calls: list[LocationFix] = []

    async def resolve(self, fix: LocationFix) -> list[Placemark]:
        self.calls.append(fix)
        if self.error is not None:
            raise self.error
        return list(self.placemarks)


class FakeWeatherService:
    """Weather fetcher answering from a dict of place name -> (weather, place)."""

    def __init__(self, responses: Optional[dict] = None):
        self.responses = responses if responses is not None else {
            "Berlin": (make_weather(0), make_place("Berlin", "Germany")),
        }
        self.calls: list[str] = []

    async def fetch_weather(self, place_name: str):
        self.calls.append(place_name)
        if place_name not in self.responses:
            raise WeatherFetchFailedError(f"City not found: {place_name}")
        result = self.responses[place_name]
        if isinstance(result, Exception):
            raise result
        return result


class GatedWeatherService:
    """Weather fetcher whose calls stay pending until released by the test."""

    def __init__(self):
        self.pending: dict[str, asyncio.Future] = {}
        self.calls: list[str] = []

    async def fetch_weather(self, place_name: str):
        self.calls.append(place_name)
        future = asyncio.get_running_loop().create_future()
        self.pending[place_name] = future
        return await future

    def release(self, place_name: str, result) -> None:
        future = self.pending[place_name]
        if isinstance(result, Exception):
            future.set_exception(result)
        else:
            future.set_result(result)


