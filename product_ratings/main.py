from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from product_ratings.api.routes import router
from product_ratings.core.config import settings
from product_ratings.core.db import create_tables, get_engine
from product_ratings.core.logging import configure_logging, logger
from product_ratings.middlewares.request_id import RequestIdMiddleware

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.db_create_tables:
        create_tables(get_engine())
    logger.info(
        "%s started (env=%s, cors=%s)",
        settings.app_name,
        settings.environment,
        settings.cors_origins_list(),
    )
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Accept", "X-Request-Id"],
    expose_headers=["X-Request-Id"],
)


# Every error leaves as {"error": "<message>"}.
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        "Rejected payload on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request payload"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Internal details stay in the log.
    request_id = getattr(request.state, "request_id", None)
    logger.exception("Unhandled exception", extra={"requestId": request_id})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Unexpected error"},
        headers={"X-Request-Id": request_id} if request_id else None,
    )


@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": settings.app_name,
        "env": settings.environment,
        "version": settings.app_version,
    }


app.include_router(router)
