"""Reverse geocoding (coordinates -> placemarks) via OpenStreetMap Nominatim.

Nominatim's usage policy requires a descriptive User-Agent; it is taken from
``Settings.user_agent``.
"""

from typing import Any, Protocol

import structlog

from weatherism.config import Settings, get_settings
from weatherism.exceptions import GeocodingFailedError
from weatherism.models.location import LocationFix, Placemark
from weatherism.services.http_client import ApiRequestError, JsonApiClient

logger = structlog.get_logger(__name__)

# Nominatim names the settlement differently depending on its size
LOCALITY_KEYS = ("city", "town", "village", "hamlet", "municipality")

GEOCODING_FAILED_MESSAGE = "Could not determine location information"


class ReverseGeocoder(Protocol):
    """Anything that can turn a location fix into candidate placemarks."""

    async def resolve(self, fix: LocationFix) -> list[Placemark]:
        ...


def placemark_from_address(address: dict[str, Any]) -> Placemark:
    """Build a placemark from a Nominatim ``address`` object."""
    locality = next((address[k] for k in LOCALITY_KEYS if address.get(k)), None)
    return Placemark(
        locality=locality,
        administrative_area=address.get("state") or address.get("region"),
        sub_administrative_area=address.get("county") or address.get("state_district"),
        country=address.get("country"),
    )


class NominatimReverseGeocoder:
    """Reverse geocoder using OpenStreetMap Nominatim."""

    def __init__(self, settings: Settings | None = None, client: JsonApiClient | None = None):
        self.settings = settings or get_settings()
        self._api = client or JsonApiClient(self.settings)

    async def close(self):
        """Close HTTP client."""
        await self._api.close()

    async def resolve(self, fix: LocationFix) -> list[Placemark]:
        """Reverse geocode one fix.

        Returns:
            Candidate placemarks, best first (Nominatim returns at most one)

        Raises:
            GeocodingFailedError: if the request fails
        """
        params = {
            "format": "jsonv2",
            "lat": f"{fix.latitude:.6f}",
            "lon": f"{fix.longitude:.6f}",
            "zoom": 10,
            "addressdetails": 1,
            "accept-language": self.settings.reverse_geocoding_language,
        }
        try:
            data = await self._api.get_json(self.settings.reverse_geocoding_url, params)
        except ApiRequestError as e:
            logger.warning(
                "reverse_geocoding_failed",
                latitude=fix.latitude,
                longitude=fix.longitude,
                error_type=e.error_type,
            )
            raise GeocodingFailedError(GEOCODING_FAILED_MESSAGE) from e

        # Nominatim reports "Unable to geocode" (e.g. open ocean) as a 200 with an error key
        if not isinstance(data, dict) or data.get("error") or not data.get("address"):
            logger.info(
                "reverse_geocoding_no_result",
                latitude=fix.latitude,
                longitude=fix.longitude,
            )
            return []

        placemark = placemark_from_address(data["address"])
        logger.debug("reverse_geocoding_success", place_name=placemark.place_name)
        return [placemark]
