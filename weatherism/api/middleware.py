"""Request logging middleware."""

import time
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-Id"


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request's logs with a correlation id and its route.

    When the request finishes, ``request_completed`` is logged with the
    weather coordinator's loading and error flags, so a slow or failing
    fetch can be matched to the client call that started it.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        request.state.correlation_id = correlation_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            correlation_id=correlation_id,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - started) * 1000)

        coordinator = getattr(request.app.state, "weather_coordinator", None)
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
            weather_loading=coordinator.is_loading if coordinator else None,
            weather_error=coordinator.has_error if coordinator else None,
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
