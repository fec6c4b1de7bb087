"""API package exports."""

from weatherism.api.middleware import CorrelationIdMiddleware
from weatherism.api.routes import router

__all__ = ["router", "CorrelationIdMiddleware"]
