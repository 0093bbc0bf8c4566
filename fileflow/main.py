"""FastAPI application entry point.

Builds the FileFlow API: template and conversion routers, the domain
error handlers and the startup/shutdown hooks that manage scratch files.
"""

import logging
import shutil
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fileflow.api.conversions import router as conversions_router
from fileflow.api.schemas import ErrorResponse
from fileflow.api.templates import router as templates_router
from fileflow.core.config import Settings, get_settings
from fileflow.core.factory import ComponentFactory
from fileflow.core.logging_config import setup_logging
from fileflow.interfaces.converter import CascadeExhausted
from fileflow.interfaces.template import RenderError, TemplateNotFoundError

VERSION = "0.1.0"

setup_logging()
logger = logging.getLogger(__name__)


def _clear_directory(directory) -> None:
    for leftover in directory.iterdir():
        if leftover.is_dir():
            shutil.rmtree(leftover, ignore_errors=True)
        else:
            leftover.unlink(missing_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report the available converters on startup, drop scratch files on shutdown."""
    settings: Settings = app.state.settings

    logger.info("Starting FileFlow API...")
    office = next((b for b in settings.office_binaries if shutil.which(b)), None)
    if office:
        logger.info(f"Office suite available: {office}")
    else:
        logger.warning(
            f"None of {settings.office_binaries} found on PATH; "
            "high-fidelity conversions will use the fallback strategies"
        )

    yield

    logger.info("Shutting down FileFlow API...")
    try:
        _clear_directory(settings.temp_dir)
    except OSError as e:
        logger.error(f"Failed to clear {settings.temp_dir}: {e}", exc_info=True)


def _error(status_code: int, detail: str, error_code: str, extra: dict[str, Any] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, error_code=error_code, extra=extra).model_dump(),
    )


def jsonable_errors(errors: list[dict]) -> list[dict]:
    """Drop non-serializable context from validation errors."""
    return [{k: v for k, v in error.items() if k not in ("ctx", "input")} for error in errors]


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP responses."""

    @app.exception_handler(TemplateNotFoundError)
    async def template_not_found_handler(request: Request, exc: TemplateNotFoundError):
        logger.warning(str(exc))
        return _error(status.HTTP_404_NOT_FOUND, str(exc), "TEMPLATE_NOT_FOUND")

    @app.exception_handler(RenderError)
    async def render_error_handler(request: Request, exc: RenderError):
        logger.warning(f"Render error on {request.url.path}: {exc.placeholders}")
        return _error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            str(exc),
            "RENDER_ERROR",
            {"placeholders": exc.placeholders, "explanation": exc.explanation},
        )

    @app.exception_handler(CascadeExhausted)
    async def cascade_exhausted_handler(request: Request, exc: CascadeExhausted):
        logger.error(f"Conversion failed on {request.url.path}: {exc}")
        failures = [{"strategy": f.strategy, "reason": f.reason} for f in exc.failures]
        return _error(status.HTTP_502_BAD_GATEWAY, str(exc), "CONVERSION_FAILED", {"failures": failures})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": "Validation error", "errors": jsonable_errors(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings. If None, loads from environment.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="FileFlow",
        description="Document templating and DOCX/PDF/TXT conversion",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.factory = ComponentFactory(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(templates_router)
    app.include_router(conversions_router)
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    async def health_check():
        """Liveness check with the number of registered templates."""
        return {
            "status": "healthy",
            "service": "fileflow-api",
            "version": VERSION,
            "templates": len(app.state.factory.get_registry()),
        }

    logger.info(f"FileFlow API created (output: {settings.output_dir})")
    return app


try:
    app = create_app()
except Exception as e:
    logger.error(f"Fatal error creating app: {e}", exc_info=True)
    raise


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    logger.info(f"Starting uvicorn server on {settings.api_host}:{settings.api_port}...")
    uvicorn.run(
        "fileflow.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
