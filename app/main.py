"""FastAPI application entry point for the Survey Stats API.

This module initializes the FastAPI application, sets up logging,
registers routers, and maps exceptions to JSON error responses.
"""

import uuid
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.logging_config import request_id_var, setup_logging, get_logger
from app.models.database import create_tables
from app.routes import health, surveys, users

logger = get_logger(__name__)

ERROR_TITLES = {
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not found",
    409: "Conflict",
}

# SQLSTATE codes reported by PostgreSQL drivers
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging and make sure tables exist before serving."""
    settings = get_settings()
    setup_logging()

    if settings.create_tables_on_startup:
        create_tables()

    logger.info(
        f"Survey Stats API starting - "
        f"Environment: {settings.environment}, "
        f"Log Level: {settings.log_level}, "
        f"Database: {settings.database_url.split('@')[-1] if '@' in settings.database_url else 'configured'}"
    )

    yield

    logger.info("Survey Stats API shutting down")


app = FastAPI(
    title="Survey Stats API",
    description="Survey management backend with per-question response statistics",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    """Tag every request with an id, echoed back in X-Request-ID."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/")
async def root() -> dict:
    """Root endpoint with basic API information."""
    settings = get_settings()
    return {
        "service": "Survey Stats API",
        "version": "1.0.0",
        "environment": settings.environment,
        "status": "operational"
    }


app.include_router(health.router, tags=["Health"])
app.include_router(surveys.router, tags=["Surveys"])
app.include_router(users.router, tags=["Users"])


def error_body(error: str, message: str, **extra) -> dict:
    return {"error": error, "message": message, **extra}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as {"error", "message"} bodies."""
    if exc.status_code == 404 and exc.detail == HTTPStatus.NOT_FOUND.phrase:
        # Raised by the router itself: no route matched
        content = error_body(
            "Not found",
            f"Route {request.method} {request.url.path} not found",
        )
    else:
        try:
            default_title = HTTPStatus(exc.status_code).phrase
        except ValueError:
            default_title = "Error"
        content = error_body(
            ERROR_TITLES.get(exc.status_code, default_title),
            str(exc.detail),
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject invalid payloads with 400 and a readable summary."""
    errors = exc.errors()
    message = ", ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in errors
    )
    logger.info(f"Validation error for {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content=error_body("Validation error", message, details=jsonable_encoder(errors)),
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Map constraint violations to client errors."""
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    detail = str(exc.orig).lower()

    if code == UNIQUE_VIOLATION or "unique" in detail:
        return JSONResponse(
            status_code=409,
            content=error_body("Duplicate entry", "This record already exists"),
        )
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in detail:
        return JSONResponse(
            status_code=400,
            content=error_body("Foreign key constraint", "Referenced record does not exist"),
        )

    logger.error(f"Integrity error for {request.method} {request.url}: {exc}")
    return JSONResponse(
        status_code=400,
        content=error_body("Constraint violation", "The request violates a data constraint"),
    )


@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError) -> JSONResponse:
    logger.error(
        f"Database error for {request.method} {request.url}: {exc}",
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content=error_body(
            "Database connection error",
            "Unable to connect to database. Please check if the database is running.",
        ),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a generic error response."""
    logger.error(
        f"Unhandled exception for {request.method} {request.url}: {exc}",
        exc_info=True
    )

    content = error_body(
        "Internal server error",
        "An unexpected error occurred. Please try again later.",
    )
    if get_settings().is_development:
        content["type"] = type(exc).__name__

    return JSONResponse(status_code=500, content=content)
