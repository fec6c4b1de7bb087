"""Location permission and one-shot fix coordination."""

import asyncio
from typing import Callable, Optional

import structlog

from weatherism.coordinators.observable import Published, Subscription, is_owner_thread
from weatherism.exceptions import LocationErrorKind, LocationUnavailableError, error_kind_for
from weatherism.models.location import AuthorizationState, LocationFailure, LocationFix
from weatherism.services.location_service import LocationProvider

logger = structlog.get_logger(__name__)

DENIED_MESSAGE = "Location access denied. Please enable location access in Settings."
UNKNOWN_AUTHORIZATION_MESSAGE = "Unknown location authorization status"

FAILURE_MESSAGES = {
    LocationErrorKind.LOCATION_UNAVAILABLE: "Unable to find location. Please try again.",
    LocationErrorKind.PERMISSION_DENIED: DENIED_MESSAGE,
    LocationErrorKind.NETWORK_FAILURE: "Network error. Please check your connection and try again.",
}


def failure_message(error: Exception) -> str:
    """User-facing message for a failure reported by the location provider."""
    kind = error_kind_for(error)
    if kind in FAILURE_MESSAGES:
        return FAILURE_MESSAGES[kind]
    description = getattr(error, "description", None) or str(error) or type(error).__name__
    return f"Location error: {description}"


def _status_name(status) -> str:
    return str(getattr(status, "value", status))


class LocationCoordinator:
    """Owns location permission state and the single in-flight location request.

    The coordinator is bound to the event loop it is created on. Provider
    callbacks and requests arriving from other threads are re-posted to that
    loop before any state changes.
    """

    def __init__(
        self,
        provider: LocationProvider,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._provider = provider
        self._loop = loop or asyncio.get_running_loop()

        self._authorization: Published[AuthorizationState] = Published(
            provider.authorization_status
        )
        self._fix: Published[Optional[LocationFix]] = Published(None)
        self._error: Published[Optional[LocationFailure]] = Published(None)
        self._requesting: Published[bool] = Published(False)

        provider.set_delegate(self)

    # State

    @property
    def authorization(self) -> AuthorizationState:
        return self._authorization.value

    @property
    def last_fix(self) -> Optional[LocationFix]:
        return self._fix.value

    @property
    def last_error(self) -> Optional[LocationFailure]:
        return self._error.value

    @property
    def error_message(self) -> Optional[str]:
        return self._error.value.message if self._error.value else None

    @property
    def is_requesting(self) -> bool:
        return self._requesting.value

    def observe_authorization(self, listener: Callable[[AuthorizationState], None]) -> Subscription:
        return self._authorization.subscribe(listener)

    def observe_fix(self, listener: Callable[[Optional[LocationFix]], None]) -> Subscription:
        return self._fix.subscribe(listener)

    def observe_error(self, listener: Callable[[Optional[LocationFailure]], None]) -> Subscription:
        return self._error.subscribe(listener)

    def observe_requesting(self, listener: Callable[[bool], None]) -> Subscription:
        return self._requesting.subscribe(listener)

    # Requests

    def request_permission(self) -> None:
        """Prompt for permission if the user has not decided yet."""
        self._on_owner(self._request_permission)

    def request_location(self) -> None:
        """Start a one-shot fix, or explain why one cannot be started."""
        self._on_owner(self._request_location)

    def _request_permission(self) -> None:
        if self.authorization != AuthorizationState.UNDETERMINED:
            return
        logger.info("location_permission_requested")
        self._provider.request_authorization()

    def _request_location(self) -> None:
        if self.is_requesting:
            logger.debug("location_request_coalesced")
            return

        self._set_error(None)
        status = self.authorization

        if status == AuthorizationState.UNDETERMINED:
            # The fix is started by on_authorization_changed once the user answers
            self._provider.request_authorization()
        elif status in (AuthorizationState.DENIED, AuthorizationState.RESTRICTED):
            self._set_error(LocationErrorKind.PERMISSION_DENIED, DENIED_MESSAGE)
        elif isinstance(status, AuthorizationState) and status.is_authorized:
            self._requesting.send(True)
            logger.info("location_fix_requested", status=_status_name(status))
            try:
                self._provider.request_one_time_fix()
            except Exception as e:
                self._handle_failure(e)
        else:
            logger.warning("location_authorization_unknown", status=_status_name(status))
            self._set_error(LocationErrorKind.UNKNOWN_AUTHORIZATION, UNKNOWN_AUTHORIZATION_MESSAGE)

    # Provider callbacks

    def on_fix_received(self, fixes: list[LocationFix]) -> None:
        self._on_owner(self._handle_fixes, list(fixes))

    def on_failure(self, error: Exception) -> None:
        self._on_owner(self._handle_failure, error)

    def on_authorization_changed(self, status: AuthorizationState) -> None:
        self._on_owner(self._handle_authorization, status)

    def _handle_fixes(self, fixes: list[LocationFix]) -> None:
        if not fixes:
            self._handle_failure(LocationUnavailableError("No location fixes reported"))
            return

        self._requesting.send(False)
        # Only the first fix of a batch is kept
        self._fix.send(fixes[0])
        self._set_error(None)
        logger.info(
            "location_fix_received",
            latitude=fixes[0].latitude,
            longitude=fixes[0].longitude,
            count=len(fixes),
        )

    def _handle_failure(self, error: Exception) -> None:
        self._requesting.send(False)
        kind = error_kind_for(error)
        logger.warning("location_fix_failed", kind=kind.value, error=str(error))
        self._set_error(kind, failure_message(error))

    def _handle_authorization(self, status: AuthorizationState) -> None:
        self._authorization.send(status)
        logger.info("location_authorization_changed", status=_status_name(status))

        if isinstance(status, AuthorizationState) and status.is_authorized:
            self._request_location()
        elif status in (AuthorizationState.DENIED, AuthorizationState.RESTRICTED):
            # An in-flight fix will not arrive once permission is revoked
            self._requesting.send(False)
            self._set_error(LocationErrorKind.PERMISSION_DENIED, DENIED_MESSAGE)
        elif status == AuthorizationState.UNDETERMINED:
            pass  # waiting for the user
        else:
            self._set_error(LocationErrorKind.UNKNOWN_AUTHORIZATION, UNKNOWN_AUTHORIZATION_MESSAGE)

    # Internals

    def _set_error(self, kind: Optional[LocationErrorKind], message: str = "") -> None:
        if kind is None:
            if self._error.value is not None:
                self._error.send(None)
            return
        self._error.send(LocationFailure(kind=kind, message=message))

    def _on_owner(self, fn: Callable, *args) -> None:
        if is_owner_thread(self._loop):
            fn(*args)
        else:
            self._loop.call_soon_threadsafe(fn, *args)

    def close(self) -> None:
        """Detach from the provider and drop all subscribers."""
        self._provider.set_delegate(None)
        for published in (self._authorization, self._fix, self._error, self._requesting):
            published.clear()
