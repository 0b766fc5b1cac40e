"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
     or: payment-ledger   (uvicorn + uvloop, host/port from settings)
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import Settings
from config.settings import settings as default_settings
from src.sp_common.errors import AppError
from src.sp_common.logging_config import configure_logging
from src.sp_common.redis_client import close_redis, create_redis
from src.sp_common.response import error_response
from src.sp_common.unit_of_work import LedgerStore
from src.sp_gateway.api.router import router as user_router
from src.sp_gateway.auth.jwt_handler import TokenService
from src.sp_gateway.middleware.rate_limit import RateLimitMiddleware
from src.sp_gateway.middleware.request_log import RequestLogMiddleware
from src.sp_gateway.user.service import UserService
from src.sp_ledger.api.router import balance_router, transactions_router
from src.sp_ledger.application.service import LedgerService
from src.sp_ledger.infrastructure.memory_store import InMemoryLedgerStore
from src.sp_ledger.infrastructure.sql_store import SqlLedgerStore

VERSION = "0.1.0"


def build_store(settings: Settings) -> LedgerStore:
    if settings.LEDGER_BACKEND == "memory":
        return InMemoryLedgerStore()
    return SqlLedgerStore.from_settings(settings)


def create_app(
    settings: Settings = default_settings,
    store: LedgerStore | None = None,
) -> FastAPI:
    store = store if store is not None else build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: connect store (+ Redis). Shutdown: dispose both."""
        await store.connect()
        if settings.RATE_LIMIT_ENABLED:
            app.state.redis = create_redis(settings.REDIS_URL)
        yield
        await close_redis(app.state.redis)
        app.state.redis = None
        await store.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        openapi_url="/docs/openapi.json",
    )

    app.state.store = store
    app.state.redis = None
    app.state.ledger = LedgerService(
        store,
        timeout_seconds=settings.OPERATION_TIMEOUT_SECONDS,
        max_amount=settings.MAX_TRANSFER_AMOUNT,
    )
    app.state.tokens = TokenService.from_settings(settings)
    app.state.users = UserService(
        store, app.state.tokens, timeout_seconds=settings.OPERATION_TIMEOUT_SECONDS
    )

    # Last added runs first: request log wraps the rate limiter
    app.add_middleware(
        RateLimitMiddleware,
        limit_per_second=settings.RATE_LIMIT_PER_SECOND,
        trusted_proxies=settings.TRUSTED_PROXIES,
    )
    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(
            exc.code, exc.message, request_id=getattr(request.state, "request_id", None)
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(user_router, prefix="/api/v1")
    app.include_router(balance_router, prefix="/api/v1")
    app.include_router(transactions_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app()


def run() -> None:
    configure_logging(default_settings.LOG_LEVEL)
    uvicorn.run(
        "src.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        loop="uvloop",
        timeout_graceful_shutdown=10,
    )
