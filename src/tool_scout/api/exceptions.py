"""Exception handlers turning errors into JSON responses."""
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.exceptions import ToolScoutError
from ..core.logging import logger


async def tool_scout_exception_handler(request: Request, exc: ToolScoutError):
    """Handle crawler and enrichment errors."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "type": type(exc).__name__,
            "details": exc.details
        }
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with proper logging."""
    logger.warning(
        f"HTTP error: {exc.status_code} - {exc.detail}",
        extra={"path": str(request.url), "method": request.method}
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "type": "http_error"
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 with the offending fields."""
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {errors}")

    return JSONResponse(
        status_code=400,
        content={
            "detail": errors[0]["msg"] if errors else "Invalid request",
            "type": "validation_error",
            "details": {"errors": errors}
        }
    )


# Exception handler registry
exception_handlers = {
    ToolScoutError: tool_scout_exception_handler,
    HTTPException: http_exception_handler,
    RequestValidationError: validation_exception_handler,
}
