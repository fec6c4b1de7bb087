"""Error taxonomy for location and weather coordination."""

from enum import Enum


class LocationErrorKind(str, Enum):
    """Kinds of failure reported on the location side."""

    PERMISSION_DENIED = "permission_denied"
    LOCATION_UNAVAILABLE = "location_unavailable"
    NETWORK_FAILURE = "network_failure"
    UNKNOWN_AUTHORIZATION = "unknown_authorization"
    OTHER = "other"


class WeatherismError(Exception):
    """Base class for errors raised by weatherism collaborators."""

    def __init__(self, description: str):
        super().__init__(description)
        self.description = description


class PermissionDeniedError(WeatherismError):
    """Location permission is denied or restricted."""


class LocationUnavailableError(WeatherismError):
    """No location fix could be determined."""


class NetworkFailureError(WeatherismError):
    """The location subsystem could not reach the network."""


class GeocodingFailedError(WeatherismError):
    """Reverse geocoding returned no usable placemark."""


class WeatherFetchFailedError(WeatherismError):
    """The weather API could not produce a snapshot for a place."""


class EmptyInputError(WeatherismError):
    """A search was submitted without a city name."""


class UnknownAuthorizationError(WeatherismError):
    """The location subsystem reported an unrecognised authorization state."""


def error_kind_for(error: Exception) -> LocationErrorKind:
    """Classify a location-side exception."""
    if isinstance(error, LocationUnavailableError):
        return LocationErrorKind.LOCATION_UNAVAILABLE
    if isinstance(error, PermissionDeniedError):
        return LocationErrorKind.PERMISSION_DENIED
    if isinstance(error, NetworkFailureError):
        return LocationErrorKind.NETWORK_FAILURE
    if isinstance(error, UnknownAuthorizationError):
        return LocationErrorKind.UNKNOWN_AUTHORIZATION
    return LocationErrorKind.OTHER
