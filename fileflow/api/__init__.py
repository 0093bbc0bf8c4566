"""FastAPI routers and dependencies."""

from fileflow.api.conversions import router as conversions_router
from fileflow.api.deps import get_document_service, get_factory, get_registry
from fileflow.api.templates import router as templates_router

__all__ = [
    "conversions_router",
    "get_document_service",
    "get_factory",
    "get_registry",
    "templates_router",
]
