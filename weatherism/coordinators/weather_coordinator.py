"""Weather state coordination: location, reverse geocoding and weather fetches."""

import asyncio
from typing import Awaitable, Callable, Optional

import structlog

from weatherism.coordinators.location_coordinator import LocationCoordinator
from weatherism.coordinators.observable import Published, Subscription, is_owner_thread
from weatherism.exceptions import EmptyInputError, GeocodingFailedError, WeatherismError
from weatherism.models.location import AuthorizationState, LocationFailure, LocationFix
from weatherism.models.state import AppState
from weatherism.models.weather import GeocodingResult, WeatherCondition, WeatherResponse
from weatherism.services import weather_codes
from weatherism.services.geocoding_service import GEOCODING_FAILED_MESSAGE, ReverseGeocoder
from weatherism.services.weather_service import WeatherFetcher

logger = structlog.get_logger(__name__)

EMPTY_INPUT_MESSAGE = "Please enter a city name"
LOCATION_DENIED_MESSAGE = (
    "Location access denied. Please enable location access in Settings "
    "to get weather for your current location."
)
LOCATION_UNAVAILABLE_MESSAGE = "Unable to access location services"
CURRENT_LOCATION_LABEL = "Current Location"

WeatherLoad = Callable[[], Awaitable[tuple[WeatherResponse, GeocodingResult]]]


def _describe(error: Exception) -> str:
    if isinstance(error, WeatherismError):
        return error.description
    return str(error) or type(error).__name__


def normalize_city_name(city_name: str) -> str:
    """Trim a typed city name.

    Raises:
        EmptyInputError: if nothing but whitespace was entered
    """
    city = city_name.strip()
    if not city:
        raise EmptyInputError(EMPTY_INPUT_MESSAGE)
    return city


class WeatherCoordinator:
    """View-model that turns user intents into a single observable ``AppState``.

    Intents: ``request_current_location_weather`` (launch and retry),
    ``search_weather`` and ``refresh_weather``. Every weather fetch runs as a
    task on the owning event loop; only the most recently started fetch may
    commit its result.
    """

    def __init__(
        self,
        location: LocationCoordinator,
        weather_service: WeatherFetcher,
        geocoder: ReverseGeocoder,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._location = location
        self._weather_service = weather_service
        self._geocoder = geocoder
        self._loop = loop or asyncio.get_running_loop()

        self._state: Published[AppState] = Published(AppState())
        self._generation = 0
        self._tasks: set[asyncio.Task] = set()

        self._subscriptions: list[Subscription] = [
            location.observe_fix(self._on_fix),
            location.observe_error(self._on_location_error),
            location.observe_requesting(self._on_requesting),
        ]

    # Observable state

    @property
    def state(self) -> AppState:
        return self._state.value

    def subscribe(self, listener: Callable[[AppState], None]) -> Subscription:
        """Receive every committed ``AppState``."""
        return self._state.subscribe(listener)

    @property
    def weather(self) -> Optional[WeatherResponse]:
        return self.state.weather

    @property
    def place(self) -> Optional[GeocodingResult]:
        return self.state.place

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error_message(self) -> Optional[str]:
        return self.state.error_message

    @property
    def has_weather_data(self) -> bool:
        return self.state.has_weather_data

    @property
    def has_error(self) -> bool:
        return self.state.has_error

    @property
    def location_display_name(self) -> str:
        place = self.state.place
        if place is None:
            return CURRENT_LOCATION_LABEL
        return f"{place.name}, {place.country}"

    @property
    def current_weather_condition(self) -> WeatherCondition:
        if self.state.weather is None:
            return WeatherCondition.CLEAR
        return weather_codes.weather_condition(self.state.weather.current.weather_code)

    def weather_condition(self, code: int) -> WeatherCondition:
        return weather_codes.weather_condition(code)

    def weather_icon_name(self, code: int) -> str:
        return weather_codes.weather_icon_name(code)

    def weather_description(self, code: int) -> str:
        return weather_codes.weather_description(code)

    # Intents

    def search_weather(self, city_name: str) -> Optional[asyncio.Task]:
        """Fetch weather for a typed city name.

        Blank input is rejected immediately without touching weather or place.

        Returns:
            The fetch task, or None when the input was rejected
        """
        self._assert_owner()
        try:
            city = normalize_city_name(city_name)
        except EmptyInputError as e:
            self._commit(error_message=e.description)
            return None

        logger.info("weather_search", city=city)
        return self._schedule(lambda: self._weather_service.fetch_weather(city))

    def refresh_weather(self) -> Optional[asyncio.Task]:
        """Re-fetch the current place by name, or fall back to the device location."""
        self._assert_owner()
        place = self.state.place
        if place is not None:
            logger.info("weather_refresh", place_name=place.name)
            return self._schedule(lambda: self._weather_service.fetch_weather(place.name))

        self.request_current_location_weather()
        return None

    def request_current_location_weather(self) -> None:
        """Start (or retry) the location-derived weather flow."""
        self._assert_owner()
        self._commit(error_message=None)

        status = self._location.authorization
        if status == AuthorizationState.UNDETERMINED:
            self._location.request_permission()
        elif status in (AuthorizationState.DENIED, AuthorizationState.RESTRICTED):
            self._commit(error_message=LOCATION_DENIED_MESSAGE)
        elif isinstance(status, AuthorizationState) and status.is_authorized:
            self._location.request_location()
        else:
            self._commit(error_message=LOCATION_UNAVAILABLE_MESSAGE)

    # Location subscriptions

    def _on_fix(self, fix: Optional[LocationFix]) -> None:
        if fix is None:
            return
        self._schedule(lambda: self._weather_for_fix(fix))

    def _on_location_error(self, failure: Optional[LocationFailure]) -> None:
        if failure is None:
            return
        # weather and place are left as they were
        self._commit(is_loading=False, error_message=failure.message)

    def _on_requesting(self, is_requesting: bool) -> None:
        if is_requesting:
            self._commit(is_loading=True, error_message=None)

    async def _weather_for_fix(self, fix: LocationFix) -> tuple[WeatherResponse, GeocodingResult]:
        placemarks = await self._geocoder.resolve(fix)
        if not placemarks:
            raise GeocodingFailedError(GEOCODING_FAILED_MESSAGE)

        place_name = placemarks[0].place_name
        logger.info("weather_place_from_fix", place_name=place_name)
        return await self._weather_service.fetch_weather(place_name)

    # Fetch cycle

    def _schedule(self, load: WeatherLoad) -> asyncio.Task:
        self._generation += 1
        task = self._loop.create_task(self._run_cycle(self._generation, load))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_cycle(self, generation: int, load: WeatherLoad) -> None:
        if generation == self._generation:
            self._commit(is_loading=True, error_message=None)

        changes: dict = {}
        try:
            weather, place = await load()
            changes = {"weather": weather, "place": place, "error_message": None}
        except Exception as e:
            logger.warning(
                "weather_fetch_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            changes = {"weather": None, "place": None, "error_message": _describe(e)}
        finally:
            if generation == self._generation:
                self._commit(is_loading=False, **changes)
            else:
                logger.info(
                    "weather_response_discarded",
                    generation=generation,
                    latest=self._generation,
                )

    def _commit(self, **changes) -> None:
        self._state.send(self._state.value.model_copy(update=changes))

    def _assert_owner(self) -> None:
        if not is_owner_thread(self._loop):
            raise RuntimeError("WeatherCoordinator must be used from its owning event loop")

    async def wait_idle(self) -> None:
        """Wait until no weather fetch is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Unsubscribe from location updates and cancel pending fetches."""
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._state.clear()
