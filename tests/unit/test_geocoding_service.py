"""Unit tests for Nominatim reverse geocoding."""

from unittest.mock import AsyncMock

import pytest

from weatherism.config import Settings
from weatherism.exceptions import GeocodingFailedError
from weatherism.models.location import LocationFix
from weatherism.services.geocoding_service import (
    NominatimReverseGeocoder,
    placemark_from_address,
)
from weatherism.services.http_client import ApiRequestError


@pytest.fixture
def fix():
    return LocationFix(latitude=35.681236, longitude=139.767125)


class TestPlacemarkFromAddress:
    """Tests for mapping Nominatim address fields."""

    def test_city(self):
        """Test a city address with state and country."""
        placemark = placemark_from_address(
            {"city": "Tokyo", "state": "Tokyo", "country": "Japan", "country_code": "jp"}
        )
        assert placemark.locality == "Tokyo"
        assert placemark.administrative_area == "Tokyo"
        assert placemark.country == "Japan"

    def test_town_and_village_count_as_locality(self):
        """Test that towns and villages fill locality."""
        assert placemark_from_address({"town": "Hallstatt"}).locality == "Hallstatt"
        assert placemark_from_address({"village": "Giethoorn"}).locality == "Giethoorn"

    def test_county_is_sub_administrative_area(self):
        """Test that county becomes the sub-administrative area."""
        placemark = placemark_from_address({"county": "Cornwall", "country": "United Kingdom"})
        assert placemark.sub_administrative_area == "Cornwall"
        assert placemark.place_name == "Cornwall"

    def test_country_only(self):
        """Test an address with nothing but a country."""
        assert placemark_from_address({"country": "Japan"}).place_name == "Japan"


class TestResolve:
    """Tests for NominatimReverseGeocoder.resolve."""

    @pytest.mark.asyncio
    async def test_returns_single_placemark(self, fix):
        """Test a successful reverse lookup and its request parameters."""
        client = AsyncMock()
        client.get_json.return_value = {
            "display_name": "Chiyoda, Tokyo, Japan",
            "address": {"city": "Chiyoda", "state": "Tokyo", "country": "Japan"},
        }
        geocoder = NominatimReverseGeocoder(Settings(), client=client)

        placemarks = await geocoder.resolve(fix)

        assert [p.place_name for p in placemarks] == ["Chiyoda"]
        url, params = client.get_json.await_args.args
        assert url == "https://nominatim.openstreetmap.org/reverse"
        assert params["format"] == "jsonv2"
        assert params["lat"] == "35.681236"

    @pytest.mark.asyncio
    async def test_unable_to_geocode_returns_empty(self, fix):
        """Test that a Nominatim error payload yields no placemarks."""
        client = AsyncMock()
        client.get_json.return_value = {"error": "Unable to geocode"}
        geocoder = NominatimReverseGeocoder(Settings(), client=client)

        assert await geocoder.resolve(fix) == []

    @pytest.mark.asyncio
    async def test_request_failure_raises(self, fix):
        """Test that a failed request raises GeocodingFailedError."""
        client = AsyncMock()
        client.get_json.side_effect = ApiRequestError("network", "connection refused")
        geocoder = NominatimReverseGeocoder(Settings(), client=client)

        with pytest.raises(GeocodingFailedError) as exc_info:
            await geocoder.resolve(fix)

        assert exc_info.value.description == "Could not determine location information"
