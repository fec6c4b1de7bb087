"""FastAPI dependencies for reaching the running coordinators."""

from fastapi import HTTPException, Request, status

from weatherism.coordinators.weather_coordinator import WeatherCoordinator


def get_weather_coordinator(request: Request) -> WeatherCoordinator:
    """Return the coordinator created by the application lifespan.

    Raises:
        HTTPException 503: If the application has not finished starting
    """
    coordinator = getattr(request.app.state, "weather_coordinator", None)
    if coordinator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather coordinator is not initialized",
        )
    return coordinator
