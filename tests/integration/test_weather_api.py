"""Integration tests for the weather HTTP surface."""

from typing import AsyncGenerator
from unittest.mock import patch

import pytest
from httpx import ASGITransport, AsyncClient

from tests.helpers import (
    FakeGeocoder,
    FakeLocationProvider,
    FakeWeatherService,
    make_place,
    make_weather,
)
from weatherism.coordinators.location_coordinator import LocationCoordinator
from weatherism.coordinators.weather_coordinator import (
    EMPTY_INPUT_MESSAGE,
    WeatherCoordinator,
)
from weatherism.models.location import AuthorizationState, LocationFix


@pytest.fixture
def api_provider() -> FakeLocationProvider:
    return FakeLocationProvider(AuthorizationState.AUTHORIZED_FULL)


@pytest.fixture
async def api_coordinator(api_provider) -> AsyncGenerator[WeatherCoordinator, None]:
    service = FakeWeatherService(
        {
            "Berlin": (make_weather(0, 21.6), make_place("Berlin", "Germany")),
            "London": (make_weather(61, 14.0), make_place("London", "United Kingdom")),
        }
    )
    location = LocationCoordinator(api_provider)
    coordinator = WeatherCoordinator(location, service, FakeGeocoder())
    yield coordinator
    await coordinator.close()
    location.close()


@pytest.fixture
async def client(api_coordinator) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with the coordinator installed directly.

    ASGITransport does not run lifespan events, so the real providers are
    never constructed.
    """
    from weatherism.main import app

    app.state.weather_coordinator = api_coordinator
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.state.weather_coordinator = None


class TestHealth:
    """Tests for the health endpoint."""

    @pytest.mark.asyncio
    async def test_health(self, client):
        """Test the health response and correlation header."""
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Correlation-Id" in response.headers


class TestState:
    """Tests for GET /state."""

    @pytest.mark.asyncio
    async def test_initial_state(self, client):
        """Test the state before any fetch."""
        response = await client.get("/state")

        body = response.json()
        assert response.status_code == 200
        assert body["is_loading"] is False
        assert body["has_weather_data"] is False
        assert body["location_display_name"] == "Current Location"
        assert body["condition"] == "clear"
        assert body["icon"] is None

    @pytest.mark.asyncio
    async def test_unavailable_before_startup(self):
        """Test the 503 response when no coordinator is installed."""
        from weatherism.main import app

        app.state.weather_coordinator = None
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
            response = await http.get("/state")

        assert response.status_code == 503


class TestSearch:
    """Tests for POST /search."""

    @pytest.mark.asyncio
    async def test_search_returns_settled_weather(self, client):
        """Test that search waits and returns the settled state with derived views."""
        response = await client.post("/search", json={"city": "London"})

        body = response.json()
        assert response.status_code == 200
        assert body["is_loading"] is False
        assert body["location_display_name"] == "London, United Kingdom"
        assert body["condition"] == "rainy"
        assert body["icon"] == "cloud.rain"
        assert body["description"] == "Slight rain"
        assert body["temperature"] == "14°C"
        assert body["weather"]["current"]["weather_code"] == 61

    @pytest.mark.asyncio
    async def test_blank_search_sets_error(self, client):
        """Test that a blank city returns the empty-input error."""
        response = await client.post("/search", json={"city": "   "})

        body = response.json()
        assert response.status_code == 200
        assert body["error_message"] == EMPTY_INPUT_MESSAGE
        assert body["has_error"] is True

    @pytest.mark.asyncio
    async def test_unknown_city(self, client):
        """Test the unknown-city error in the response."""
        response = await client.post("/search", json={"city": "Atlantis"})

        body = response.json()
        assert body["error_message"] == "City not found: Atlantis"
        assert body["weather"] is None

    @pytest.mark.asyncio
    async def test_missing_city_is_rejected(self, client):
        """Test request validation for a missing city."""
        response = await client.post("/search", json={})
        assert response.status_code == 422


class TestRefreshAndLocation:
    """Tests for POST /refresh and POST /location."""

    @pytest.mark.asyncio
    async def test_refresh_after_search(self, client):
        """Test refreshing the last searched place."""
        await client.post("/search", json={"city": "Berlin"})

        response = await client.post("/refresh")

        body = response.json()
        assert body["place"]["name"] == "Berlin"
        assert body["temperature"] == "22°C"

    @pytest.mark.asyncio
    async def test_location_starts_fix_then_state_settles(self, client, api_provider, api_coordinator):
        """Test that /location starts a fix and the state settles after delivery."""
        response = await client.post("/location")

        assert response.json()["is_loading"] is True
        assert api_provider.fix_requests == 1

        api_provider.deliver(LocationFix(latitude=52.52, longitude=13.40))
        await api_coordinator.wait_idle()

        body = (await client.get("/state")).json()
        assert body["is_loading"] is False
        assert body["location_display_name"] == "Berlin, Germany"


class TestRequestLogging:
    """Tests for the correlation id and request logging middleware."""

    @pytest.mark.asyncio
    async def test_echoes_incoming_correlation_id(self, client):
        """Test that a caller-supplied correlation id is returned unchanged."""
        response = await client.get("/health", headers={"X-Correlation-Id": "abc-123"})
        assert response.headers["X-Correlation-Id"] == "abc-123"

    @pytest.mark.asyncio
    async def test_logs_weather_flags_on_completion(self, client):
        """Test that request_completed carries the coordinator's flags."""
        with patch("weatherism.api.middleware.logger") as mock_logger:
            await client.post("/search", json={"city": "Atlantis"})

        mock_logger.info.assert_called_once()
        args, kwargs = mock_logger.info.call_args
        assert args == ("request_completed",)
        assert kwargs["status_code"] == 200
        assert kwargs["weather_loading"] is False
        assert kwargs["weather_error"] is True
