"""Exception handlers for the FastAPI application."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.exceptions import AppException, ErrorCode, StorageError

logger = structlog.get_logger()

INTERNAL_ERROR_MESSAGE = "Internal Server Error"

# Unhandled exceptions are answered by Starlette's outermost middleware,
# which sits outside CORS, so the header is set here explicitly.
_CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


def internal_error_response(details: str, request_id: str | None = None) -> JSONResponse:
    """Build the generic 500 body shared by storage and unhandled failures."""
    content: dict[str, object] = {
        "error": INTERNAL_ERROR_MESSAGE,
        "details": details,
    }
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(status_code=500, content=content, headers=_CORS_HEADERS)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
        """Storage failures surface as a generic 500 with diagnostic detail."""
        request_id = getattr(request.state, "request_id", None)
        logger.error(
            "storage_error",
            operation=exc.operation,
            message=exc.message,
            cause=repr(exc.__cause__) if exc.__cause__ else None,
        )
        return internal_error_response(exc.message, request_id)

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle custom application exceptions, preserving their status code."""
        logger.warning(
            "app_exception",
            error_code=exc.error_code.value,
            status_code=exc.status_code,
            message=exc.message,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.message,
                "error_code": exc.error_code.value,
                "details": exc.details,
            },
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle HTTP exceptions from FastAPI/Starlette."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.detail,
                "error_code": "HTTP_ERROR",
                "details": None,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.info("validation_error", errors=exc.errors())
        return JSONResponse(
            status_code=422,
            content={
                "error": "Request validation failed",
                "error_code": ErrorCode.VALIDATION_ERROR.value,
                "details": [
                    {
                        "field": ".".join(str(x) for x in error["loc"]),
                        "message": error["msg"],
                        "type": error["type"],
                    }
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            request_id=request_id,
            exc_info=True,
        )

        details = "An unexpected error occurred"
        if not settings.is_production:
            details = str(exc)

        return internal_error_response(details, request_id)
