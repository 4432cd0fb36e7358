"""Exception handlers that render every failure with a ``msg`` field."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from user_api.core.exceptions import UserServiceError


async def user_service_error_handler(request: Request, exc: UserServiceError) -> JSONResponse:
    """Render a domain error with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} {exc.extra}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_content()))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render a request body/path validation error."""
    return JSONResponse(
        status_code=422,
        content={"msg": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Render an unexpected store failure."""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"msg": "Server Error", "error": str(exc)})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render any other exception as an internal error."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"msg": "Server Error", "error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Args:
        app: The FastAPI application.
    """
    app.add_exception_handler(UserServiceError, user_service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, database_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
