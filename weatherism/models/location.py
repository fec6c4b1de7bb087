"""Location data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from weatherism.exceptions import LocationErrorKind

UNKNOWN_LOCATION = "Unknown Location"


class AuthorizationState(str, Enum):
    """Location permission as reported by the location provider."""

    UNDETERMINED = "undetermined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    AUTHORIZED_LIMITED = "authorized_limited"
    AUTHORIZED_FULL = "authorized_full"

    @property
    def is_authorized(self) -> bool:
        return self in (
            AuthorizationState.AUTHORIZED_LIMITED,
            AuthorizationState.AUTHORIZED_FULL,
        )


class LocationFix(BaseModel):
    """A single location fix."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the fix was taken",
    )


class Placemark(BaseModel):
    """A reverse geocoding candidate."""

    model_config = ConfigDict(frozen=True)

    locality: Optional[str] = Field(None, description="City or town")
    administrative_area: Optional[str] = Field(None, description="State or province")
    sub_administrative_area: Optional[str] = Field(None, description="County or district")
    country: Optional[str] = Field(None, description="Country name")

    @property
    def place_name(self) -> str:
        """Best available name, falling back from locality to country."""
        for candidate in (
            self.locality,
            self.administrative_area,
            self.sub_administrative_area,
            self.country,
        ):
            if candidate:
                return candidate
        return UNKNOWN_LOCATION


class LocationFailure(BaseModel):
    """A location error together with the message shown to the user."""

    model_config = ConfigDict(frozen=True)

    kind: LocationErrorKind
    message: str
