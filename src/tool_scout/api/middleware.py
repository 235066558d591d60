"""Request/response middleware."""
import time
import uuid
from fastapi import Request
from ..core.logging import logger


async def add_process_time_header(request: Request, call_next):
    """
    Middleware to add processing time and request ID headers to responses.

    An incoming ``X-Request-ID`` is echoed back; otherwise a new one is made.

    Args:
        request: FastAPI request object
        call_next: Next middleware callable

    Returns:
        Response with added headers
    """
    start_time = time.time()
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Process-Time"] = str(process_time)
        response.headers["X-Request-ID"] = request_id

        logger.info(
            f"[{request_id[:8]}] {request.method} {request.url.path} "
            f"Status: {response.status_code} "
            f"Time: {process_time:.3f}s"
        )

        return response

    except Exception as exc:
        process_time = time.time() - start_time
        logger.error(
            f"[{request_id[:8]}] Request failed: {request.method} {request.url.path} "
            f"Time: {process_time:.3f}s Error: {str(exc)}"
        )
        raise
