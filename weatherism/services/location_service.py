"""Location providers: the device-side source of permission and fixes.

A provider reports back through a ``LocationDelegate``. Callbacks may fire on
any thread; the receiving coordinator is responsible for marshaling them onto
its own event loop.
"""

import asyncio
from typing import Optional, Protocol

import structlog

from weatherism.config import Settings, get_settings
from weatherism.exceptions import (
    LocationUnavailableError,
    NetworkFailureError,
    PermissionDeniedError,
)
from weatherism.models.location import AuthorizationState, LocationFix
from weatherism.services.http_client import ApiRequestError, JsonApiClient

logger = structlog.get_logger(__name__)


class LocationDelegate(Protocol):
    """Receiver of provider notifications."""

    def on_authorization_changed(self, status: AuthorizationState) -> None:
        ...

    def on_fix_received(self, fixes: list[LocationFix]) -> None:
        ...

    def on_failure(self, error: Exception) -> None:
        ...


class LocationProvider(Protocol):
    """Device location subsystem."""

    @property
    def authorization_status(self) -> AuthorizationState:
        ...

    def set_delegate(self, delegate: Optional[LocationDelegate]) -> None:
        ...

    def request_authorization(self) -> None:
        ...

    def request_one_time_fix(self) -> None:
        ...


class IPLocationProvider:
    """Location provider backed by IP geolocation (ip-api.com).

    There is no OS permission prompt on a server or desktop, so the prompt is
    answered by ``Settings.location_permission_granted``. Fixes are coarse
    (city level) and delivered asynchronously on the running event loop.
    """

    def __init__(self, settings: Settings | None = None, client: JsonApiClient | None = None):
        self.settings = settings or get_settings()
        self._api = client or JsonApiClient(self.settings)
        self._status = AuthorizationState.UNDETERMINED
        self._delegate: Optional[LocationDelegate] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def authorization_status(self) -> AuthorizationState:
        return self._status

    def set_delegate(self, delegate: Optional[LocationDelegate]) -> None:
        self._delegate = delegate

    def request_authorization(self) -> None:
        if self._status != AuthorizationState.UNDETERMINED:
            return
        self._status = (
            AuthorizationState.AUTHORIZED_LIMITED
            if self.settings.location_permission_granted
            else AuthorizationState.DENIED
        )
        logger.info("location_authorization_answered", status=self._status.value)
        asyncio.get_running_loop().call_soon(self._notify_authorization)

    def request_one_time_fix(self) -> None:
        task = asyncio.get_running_loop().create_task(self._lookup())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def close(self):
        """Cancel pending lookups and close HTTP client."""
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._api.close()

    def _notify_authorization(self) -> None:
        if self._delegate is not None:
            self._delegate.on_authorization_changed(self._status)

    async def _lookup(self) -> None:
        if not self._status.is_authorized:
            self._fail(PermissionDeniedError("Location permission not granted"))
            return

        try:
            data = await self._api.get_json(
                self.settings.ip_location_url,
                {"fields": "status,message,lat,lon"},
            )
        except ApiRequestError as e:
            if e.error_type in ("network", "timeout"):
                self._fail(NetworkFailureError(str(e)))
            else:
                self._fail(LocationUnavailableError(str(e)))
            return

        if not isinstance(data, dict) or data.get("status") != "success":
            message = data.get("message", "lookup failed") if isinstance(data, dict) else "lookup failed"
            logger.info("ip_location_unavailable", reason=message)
            self._fail(LocationUnavailableError(message))
            return

        try:
            fix = LocationFix(latitude=float(data["lat"]), longitude=float(data["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            self._fail(LocationUnavailableError(str(e)))
            return

        logger.info("ip_location_fix", latitude=fix.latitude, longitude=fix.longitude)
        if self._delegate is not None:
            self._delegate.on_fix_received([fix])

    def _fail(self, error: Exception) -> None:
        logger.warning("ip_location_failed", error=str(error), error_type=type(error).__name__)
        if self._delegate is not None:
            self._delegate.on_failure(error)
