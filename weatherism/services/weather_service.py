"""Weather service for Open-Meteo API integration."""

import time
from datetime import date, datetime
from typing import Any, Protocol

import structlog

from weatherism.config import Settings, get_settings
from weatherism.exceptions import WeatherFetchFailedError
from weatherism.models.weather import (
    CurrentWeather,
    ForecastDay,
    GeocodingResult,
    WeatherResponse,
)
from weatherism.services.http_client import ApiRequestError, JsonApiClient

logger = structlog.get_logger(__name__)

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "apparent_temperature",
    "is_day",
    "weather_code",
    "wind_speed_10m",
)
DAILY_FIELDS = (
    "weather_code",
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_probability_max",
)


class WeatherFetcher(Protocol):
    """Anything that can turn a place name into a weather snapshot."""

    async def fetch_weather(self, place_name: str) -> tuple[WeatherResponse, GeocodingResult]:
        ...


def _get_error_message(error_type: str, location: str | None = None) -> str:
    """Get user-friendly error message for error type."""
    messages = {
        "city_not_found": f"City not found: {location}",
        "timeout": "The weather request took too long. Please try again.",
        "rate_limited": "Weather service is temporarily busy. Please try again in a moment.",
        "server_error": "Weather service is unavailable right now. Please try again in a few minutes.",
        "network": "Unable to reach the weather service. Please check your connection and try again.",
        "invalid_response": "Received an invalid response from the weather service.",
        "unknown": "An unexpected error occurred while fetching weather data. Please try again.",
    }
    return messages.get(error_type, messages["unknown"])


def _parse_place(data: dict[str, Any]) -> GeocodingResult:
    return GeocodingResult(
        name=data["name"],
        country=data.get("country", ""),
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        admin1=data.get("admin1"),
        timezone=data.get("timezone"),
    )


def _parse_forecast(data: dict[str, Any]) -> WeatherResponse:
    """Parse an Open-Meteo forecast payload.

    Daily values arrive as parallel arrays keyed by field name.
    """
    current = data["current"]
    humidity = current.get("relative_humidity_2m")

    daily = data.get("daily") or {}
    days = []
    for i, day in enumerate(daily.get("time", [])):
        probabilities = daily.get("precipitation_probability_max") or []
        probability = probabilities[i] if i < len(probabilities) else None
        days.append(
            ForecastDay(
                date=date.fromisoformat(day),
                weather_code=int(daily["weather_code"][i]),
                temperature_max=float(daily["temperature_2m_max"][i]),
                temperature_min=float(daily["temperature_2m_min"][i]),
                precipitation_probability=int(probability) if probability is not None else None,
            )
        )

    return WeatherResponse(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
        timezone=data.get("timezone", "GMT"),
        current=CurrentWeather(
            time=datetime.fromisoformat(current["time"]),
            temperature=float(current["temperature_2m"]),
            apparent_temperature=current.get("apparent_temperature"),
            relative_humidity=int(humidity) if humidity is not None else None,
            wind_speed=current.get("wind_speed_10m"),
            weather_code=int(current["weather_code"]),
            is_day=bool(current.get("is_day", 1)),
        ),
        daily=days,
    )


class OpenMeteoWeatherService:
    """Service for fetching weather data from Open-Meteo."""

    def __init__(self, settings: Settings | None = None, client: JsonApiClient | None = None):
        self.settings = settings or get_settings()
        self._api = client or JsonApiClient(self.settings)

    async def close(self):
        """Close HTTP client."""
        await self._api.close()

    async def geocode(self, place_name: str) -> GeocodingResult:
        """Resolve a place name to coordinates.

        Raises:
            WeatherFetchFailedError: if the place is unknown or the API fails
        """
        try:
            data = await self._api.get_json(
                f"{self.settings.geocoding_api_base_url}/search",
                {"name": place_name, "count": 1, "language": "en", "format": "json"},
            )
        except ApiRequestError as e:
            raise WeatherFetchFailedError(_get_error_message(e.error_type)) from e

        results = (data or {}).get("results") or []
        if not results:
            logger.info("weather_city_not_found", place_name=place_name)
            raise WeatherFetchFailedError(_get_error_message("city_not_found", place_name))

        try:
            return _parse_place(results[0])
        except (KeyError, TypeError, ValueError) as e:
            logger.error("weather_geocoding_parse_error", error=str(e), error_type=type(e).__name__)
            raise WeatherFetchFailedError(_get_error_message("invalid_response")) from e

    async def get_forecast(self, place: GeocodingResult) -> WeatherResponse:
        """Fetch current conditions and the daily forecast for a resolved place."""
        params = {
            "latitude": place.latitude,
            "longitude": place.longitude,
            "current": ",".join(CURRENT_FIELDS),
            "daily": ",".join(DAILY_FIELDS),
            "forecast_days": max(1, min(16, self.settings.forecast_days)),
            "timezone": "auto",
        }
        try:
            data = await self._api.get_json(
                f"{self.settings.weather_api_base_url}/forecast", params
            )
        except ApiRequestError as e:
            raise WeatherFetchFailedError(_get_error_message(e.error_type)) from e

        try:
            return _parse_forecast(data)
        except (KeyError, TypeError, ValueError, IndexError) as e:
            logger.error("weather_forecast_parse_error", error=str(e), error_type=type(e).__name__)
            raise WeatherFetchFailedError(_get_error_message("invalid_response")) from e

    async def fetch_weather(self, place_name: str) -> tuple[WeatherResponse, GeocodingResult]:
        """Get weather for a place name.

        Args:
            place_name: City or region name

        Returns:
            The weather snapshot and the place it was resolved to

        Raises:
            WeatherFetchFailedError: with a user-facing description
        """
        start_time = time.perf_counter()
        place = await self.geocode(place_name)
        weather = await self.get_forecast(place)

        logger.info(
            "weather_request_success",
            place_name=place_name,
            resolved=place.name,
            weather_code=weather.current.weather_code,
            latency_ms=int((time.perf_counter() - start_time) * 1000),
        )
        return weather, place
