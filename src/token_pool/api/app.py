"""FastAPI app factory with error mapping, request logging and health route."""

import time
from contextlib import asynccontextmanager
from typing import Optional
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __version__
from ..config import Config, TokenPoolSettings
from ..errors import CapacityExceededError, StoreUnavailableError, TokenPoolError
from ..redis_client import close_redis_client, get_redis_client
from ..store import RedisLeaseStore
from ..tokens import TokenLifecycleManager
from .models import HealthResponse
from .routes import router


def _error(status_code: int, message: str) -> JSONResponse:
    logger.error(f"HTTP {status_code} - {message}")
    return JSONResponse(
        status_code=status_code, content={"statusCode": status_code, "message": message}
    )


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Malformed request body")

    @app.exception_handler(CapacityExceededError)
    async def _capacity_error(request: Request, exc: CapacityExceededError) -> JSONResponse:
        return _error(status.HTTP_409_CONFLICT, str(exc))

    @app.exception_handler(StoreUnavailableError)
    async def _store_error(request: Request, exc: StoreUnavailableError) -> JSONResponse:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Token store unavailable")

    @app.exception_handler(TokenPoolError)
    async def _pool_error(request: Request, exc: TokenPoolError) -> JSONResponse:
        logger.exception(f"Unhandled token pool error: {exc}")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


def create_app(manager: Optional[TokenLifecycleManager] = None) -> FastAPI:
    """
    Build the token API.

    Args:
        manager: Lifecycle manager to serve. When omitted, the lifespan builds
            one on the shared Redis client and owns both.

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_redis = app.state.manager is None
        if owns_redis:
            redis = await get_redis_client()
            app.state.manager = TokenLifecycleManager(
                RedisLeaseStore(redis), TokenPoolSettings.from_config()
            )
        await app.state.manager.start()
        logger.info(f"Token service started (redis={Config.REDIS_URL})")
        try:
            yield
        finally:
            await app.state.manager.close()
            if owns_redis:
                await close_redis_client()
            logger.info("Token service stopped")

    app = FastAPI(title="Token Pool", version=__version__, lifespan=lifespan)
    app.state.manager = manager

    _install_error_handlers(app)

    @app.middleware("http")
    async def request_logger(request: Request, call_next):
        """Log each request with a correlation id echoed as X-Request-ID."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"Request failed: {request.method} {request.url.path} (request_id={request_id})"
            )
            raise
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        response.headers["X-Request-ID"] = request_id
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.2f}ms, request_id={request_id})"
        )
        return response

    @app.get("/health", response_model=HealthResponse, summary="Readiness check")
    async def health(request: Request) -> HealthResponse:
        stats = await request.app.state.manager.stats()
        return HealthResponse(
            status="ok",
            pool_size=stats.pool_size,
            leased=stats.leased,
            max_tokens=stats.max_tokens,
        )

    app.include_router(router)
    return app
