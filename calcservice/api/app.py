"""
FastAPI application - HTTP surface of the calculator service.

create_app() builds a fresh application around an explicitly constructed
history store. Tests pass their own store; in production the store is built
from configuration and connected in the lifespan.
"""

import uuid
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

from calcservice.api.handlers import CalculationHandler
from calcservice.history.factory import create_history_store
from calcservice.shared.config import AppConfig, load_config
from calcservice.shared.constants import DB_HEALTH_FAILED, HISTORY_READ_FAILED, INTERNAL_ERROR
from calcservice.shared.errors import CalculatorError, StorageError
from calcservice.shared.interfaces import IHistoryStore
from calcservice.shared.logging_utils import (
    StructuredLogger,
    configure_logging,
    get_logger,
    request_id_ctx,
)
from calcservice.shared.models import OperationType, json_number


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Generates a unique request ID, stores it in ContextVar, adds to response header."""
    async def dispatch(self, request: Request, call_next):
        request_id = uuid.uuid4().hex[:12]
        token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response


# --- Pydantic response models ---

class CalculationResponse(BaseModel):
    result: Optional[Union[int, float]]


class DBHealthResponse(BaseModel):
    status: str  # Connected, Disconnected
    dbName: str
    collections: int


# --- API Endpoints ---

router = APIRouter()


def get_handler(request: Request) -> CalculationHandler:
    return request.app.state.handler


def _operation_endpoint(op: OperationType):
    async def endpoint(
        num1: Optional[str] = None,
        num2: Optional[str] = None,
        handler: CalculationHandler = Depends(get_handler),
    ) -> CalculationResponse:
        result = await handler.calculate(op, num1, num2)
        return CalculationResponse(result=json_number(result))

    endpoint.__name__ = f"{op.value}_endpoint"
    return endpoint


for _op in OperationType:
    router.add_api_route(
        f"/{_op.value}",
        _operation_endpoint(_op),
        methods=["GET"],
        response_model=CalculationResponse,
        name=_op.value,
    )


@router.get("/history")
async def get_history(handler: CalculationHandler = Depends(get_handler)):
    try:
        records = await handler.history()
    except StorageError:
        return JSONResponse(status_code=500, content={"error": HISTORY_READ_FAILED})
    return {"history": [r.to_dict() for r in records]}


@router.get("/db-health", response_model=DBHealthResponse)
async def db_health(request: Request, handler: CalculationHandler = Depends(get_handler)):
    try:
        status = await handler.db_health()
    except StorageError as e:
        request.app.state.logger.error("Database health check failed", error=e.message)
        return JSONResponse(status_code=500, content={"error": DB_HEALTH_FAILED})
    return DBHealthResponse(**status.to_dict())


@router.get("/health", response_class=PlainTextResponse)
async def health():
    return PlainTextResponse("OK")


def create_app(
    config: Optional[AppConfig] = None,
    history_store: Optional[IHistoryStore] = None,
    logger: Optional[StructuredLogger] = None,
) -> FastAPI:
    """
    Build the application.

    A store passed in is used as-is and left open at shutdown; a store built
    here from configuration is connected at startup and closed at shutdown.
    """
    config = config or load_config()
    logger = logger or get_logger("calcservice", config)
    owns_store = history_store is None
    store = history_store
    if owns_store:
        store = create_history_store(config, logger.child("history"))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup and shutdown."""
        configure_logging(config)
        await store.connect()
        logger.info(
            f"{config.service_name} started",
            environment=config.environment, port=config.api_port,
        )
        yield
        if owns_store:
            await store.close()
        logger.info(f"{config.service_name} shutdown")

    app = FastAPI(
        title="CalcService",
        description="Calculator microservice with persistent history",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.logger = logger
    app.state.history_store = store
    app.state.handler = CalculationHandler(
        store, logger.child("handlers"), history_limit=config.history.limit,
    )

    @app.exception_handler(CalculatorError)
    async def calculator_error_handler(request: Request, exc: CalculatorError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})

    app.add_middleware(RequestIDMiddleware)
    app.include_router(router)
    return app
