"""
FastAPI application entry point

Responsible for:
1. Creating the FastAPI application
2. Global middleware (CORS, Sentry)
3. Global exception handlers rendering ``{"error": message, "code": code}``
4. Mounting the API routers

Run with:
    uvicorn airctt.main:app --reload
    fastapi dev airctt/main.py
"""
import logging

import sentry_sdk
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import SQLAlchemyError

from airctt.api.errors import AppError, PersistenceError
from airctt.api.main import api_router, next_api_router
from airctt.api.schemas import ErrorBody
from airctt.core.config import settings

logger = logging.getLogger(__name__)


def custom_generate_unique_id(route: APIRoute) -> str:
    """
    OpenAPI operation id as ``{tag}-{route name}``

    Example:
        "coupons-issue"
    """
    return f"{route.tags[0]}-{route.name}"


if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":  # pragma: no cover
    sentry_sdk.init(dsn=str(settings.SENTRY_DSN), enable_tracing=True)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    generate_unique_id_function=custom_generate_unique_id,
)


def error_response(status_code: int, message: str, code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorBody(error=message, code=code).model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """
    Application error handler

    Renders every AppError with its own status and business code.

    Args:
        _: request (unused)
        exc: AppError instance

    Returns:
        JSONResponse: ``{"error": message, "code": code}``
    """
    return error_response(exc.status_code, exc.message, exc.code)


@app.exception_handler(HTTPException)
async def http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """
    HTTP exception handler

    Errors raised by dependencies (401 from authentication) get the same body
    as application errors, with code ``status * 1000``.
    """
    return error_response(exc.status_code, str(exc.detail), exc.status_code * 1000)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Request validation error handler

    Malformed bodies and parameters (bad UUIDs, wrong types) are client input
    errors and are answered with 400.

    Args:
        _: request (unused)
        exc: RequestValidationError instance

    Returns:
        JSONResponse: 400 with code 400000 and the first validation message
    """
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"Invalid request: {location}: {first.get('msg', '')}"
    return error_response(400, message, 400000)


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(_: Request, exc: SQLAlchemyError) -> JSONResponse:
    """
    Database error handler

    Any database failure is logged with its traceback and reported as a
    PersistenceError. The request session rolls back when it closes.
    """
    logger.error("database error: %s", exc, exc_info=exc)
    err = PersistenceError()
    return error_response(err.status_code, err.message, err.code)


if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_PREFIX)
app.include_router(next_api_router, prefix=settings.NEXT_API_PREFIX)
