"""FastAPI application initialization."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Load environment variables before anything else
load_dotenv()

from fastapi import FastAPI

from weatherism import __version__
from weatherism.api.middleware import CorrelationIdMiddleware
from weatherism.api.routes import router
from weatherism.config import get_settings
from weatherism.coordinators.location_coordinator import LocationCoordinator
from weatherism.coordinators.weather_coordinator import WeatherCoordinator
from weatherism.services.geocoding_service import NominatimReverseGeocoder
from weatherism.services.location_service import IPLocationProvider
from weatherism.services.logging_service import configure_logging, get_logger
from weatherism.services.weather_service import OpenMeteoWeatherService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire providers and coordinators on startup; tear them down on shutdown."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger = get_logger("main")

    provider = IPLocationProvider(settings)
    geocoder = NominatimReverseGeocoder(settings)
    weather_service = OpenMeteoWeatherService(settings)

    location = LocationCoordinator(provider)
    coordinator = WeatherCoordinator(location, weather_service, geocoder)
    app.state.location_coordinator = location
    app.state.weather_coordinator = coordinator

    logger.info("application_started", log_level=settings.log_level)

    # Same as a client opening the app
    coordinator.request_current_location_weather()

    yield

    await coordinator.close()
    location.close()
    await provider.close()
    await geocoder.close()
    await weather_service.close()
    app.state.weather_coordinator = None

    logger.info("application_shutdown")


app = FastAPI(
    title="Weatherism",
    description="Current weather for your location or a searched city",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationIdMiddleware)
app.include_router(router)
