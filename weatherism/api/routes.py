"""API route definitions: the presentation surface over the weather coordinator."""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from weatherism.api.dependencies import get_weather_coordinator
from weatherism.coordinators.weather_coordinator import WeatherCoordinator
from weatherism.services import weather_codes

logger = structlog.get_logger(__name__)

router = APIRouter()


class SearchRequest(BaseModel):
    """City search submitted by a client."""

    city: str = Field(..., max_length=200, description="City name as typed by the user")


def _format_state(coordinator: WeatherCoordinator) -> dict:
    """Format the coordinator state plus derived views for a client."""
    state = coordinator.state
    condition = coordinator.current_weather_condition
    code = state.weather.current.weather_code if state.weather else None

    return {
        "is_loading": state.is_loading,
        "error_message": state.error_message,
        "has_weather_data": state.has_weather_data,
        "has_error": state.has_error,
        "location_display_name": coordinator.location_display_name,
        "condition": condition.value,
        "icon": weather_codes.weather_icon_name(code) if code is not None else None,
        "description": weather_codes.weather_description(code) if code is not None else None,
        "temperature": (
            weather_codes.format_temperature(state.weather.current.temperature)
            if state.weather
            else None
        ),
        "theme": list(weather_codes.background_theme(condition if state.weather else None)),
        "weather": state.weather.model_dump(mode="json") if state.weather else None,
        "place": state.place.model_dump(mode="json") if state.place else None,
    }


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/state")
async def get_state(
    coordinator: WeatherCoordinator = Depends(get_weather_coordinator),
) -> dict:
    """Current application state."""
    return _format_state(coordinator)


@router.post("/search")
async def search(
    request: SearchRequest,
    wait: bool = Query(default=True, description="Wait for the fetch to settle"),
    coordinator: WeatherCoordinator = Depends(get_weather_coordinator),
) -> dict:
    """Search weather by city name."""
    task = coordinator.search_weather(request.city)
    if task is not None and wait:
        await coordinator.wait_idle()
    return _format_state(coordinator)


@router.post("/refresh")
async def refresh(
    wait: bool = Query(default=True, description="Wait for the fetch to settle"),
    coordinator: WeatherCoordinator = Depends(get_weather_coordinator),
) -> dict:
    """Refresh weather for the current place."""
    task = coordinator.refresh_weather()
    if task is not None and wait:
        await coordinator.wait_idle()
    return _format_state(coordinator)


@router.post("/location")
async def current_location(
    coordinator: WeatherCoordinator = Depends(get_weather_coordinator),
) -> dict:
    """Start (or retry) weather for the current location.

    The location fix arrives asynchronously; poll ``/state`` for the result.
    """
    coordinator.request_current_location_weather()
    return _format_state(coordinator)
