"""FastAPI application main module.

This module builds the FastAPI application for the Local Food Lovers Network:
it wires the entity routers, the error handlers, request logging and the
store session lifecycle, and provides the health and metrics endpoints.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from src import __version__
from src.api.exceptions import FoodNetworkException
from src.api.logging_config import RequestLoggingMiddleware, setup_logging
from src.api.metrics import metrics_service
from src.api.routes import favorites, recipes, reviews
from src.api.schemas import ErrorResponse
from src.config import Settings, get_settings
from src.store.session import StoreSession

# Configure module logger
logger = logging.getLogger(__name__)

ROOT_MESSAGE = "Local Food Lovers Network Server is running"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Connect the shared store session on startup and close it on shutdown."""
    store: StoreSession = app.state.store
    logger.info("Starting Local Food Lovers Network Server")
    store.connect()

    yield

    logger.info("Shutting down Local Food Lovers Network Server")
    store.close()


async def handle_app_exception(request: Request, exc: FoodNetworkException) -> JSONResponse:
    """Render application exceptions as ``{"error", "message", "details"}``."""
    if exc.status_code >= 500:
        logger.error(
            "Request failed with server error",
            extra={"path": str(request.url.path), "error_type": type(exc).__name__},
        )
    else:
        logger.warning(
            exc.message,
            extra={"path": str(request.url.path), "error_type": type(exc).__name__},
        )

    body = ErrorResponse(
        error=type(exc).__name__,
        message=exc.message,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))


async def handle_request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed bodies and parameters with 400 instead of 422."""
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(
        "Request validation failed",
        extra={"path": str(request.url.path), "errors": errors},
    )

    body = ErrorResponse(
        error="ValidationError",
        message="Invalid request",
        details={"errors": errors},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=jsonable_encoder(body)
    )


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[StoreSession] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Service settings; defaults to the environment.
        store: Store session to use; one is created from ``settings`` if
            omitted. Tests pass a session around an in-memory client.

    Returns:
        The configured application. The store is connected when the
        application's lifespan starts.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Local Food Lovers Network API",
        description="Recipes, reviews and favorites for local food lovers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store or StoreSession(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(FoodNetworkException, handle_app_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)

    # Include routers
    app.include_router(recipes.router)
    app.include_router(reviews.router)
    app.include_router(favorites.router)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        return ROOT_MESSAGE

    @app.get("/ping")
    def ping() -> Dict[str, str]:
        """Liveness check; never touches the store.

        Example:
            >>> response = client.get("/ping")
            >>> assert response.json() == {"status": "ok"}
        """
        return {"status": "ok"}

    @app.get("/status")
    def store_status(request: Request) -> Dict[str, Any]:
        """Report whether the document store answers a ping."""
        store_session: StoreSession = request.app.state.store
        reachable = store_session.ping()
        return {
            "status": "ok" if reachable else "degraded",
            "database": store_session.database_name,
            "store_reachable": reachable,
        }

    @app.get("/metrics")
    def metrics() -> Dict[str, Any]:
        return metrics_service.get_metrics()

    return app


# Create FastAPI application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
