"""FastAPI application factory"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
from starlette.middleware.base import BaseHTTPMiddleware

import src.domain  # noqa: F401  registers table metadata
from src.api.error import ClientError, client_error_handler
from src.api.routes import (
    balances,
    cash_submissions,
    merchant_payments,
    point_cards,
    points,
    sales,
    transaction_pin,
)
from src.app.errors import ErrorCode

logger = logging.getLogger("points_ledger.api")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access log line per request with the caller and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"actor={request.headers.get('x-actor-id', '-')} {duration_ms}ms"
        )
        return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(
        {
            "error": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Invalid request parameters",
                "details": details,
            }
        },
        status_code=400,
    )


def create_app(config) -> FastAPI:
    """
    Build the ledger API

    Args:
        config: ApplicationConfig-like class with API and database settings
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.AUTO_CREATE_TABLES:
            from src.depends import engine

            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database tables ensured")
        yield

    app = FastAPI(
        title="Points Ledger",
        description="Closed-loop points ledger with merchant payments, point cards and cash reconciliation",
        version="1.0.0",
        lifespan=lifespan,
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    if config.ENABLE_LOGGING_MIDDLEWARE:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    for module in (balances, points, sales, merchant_payments, point_cards, cash_submissions, transaction_pin):
        app.include_router(module.router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
