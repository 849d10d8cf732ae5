"""
Logging middleware for request/response tracking.
"""
import time

from fastapi import Request

from courseqa.core.logging import get_logger

logger = get_logger(__name__)


async def logging_middleware(request: Request, call_next):
    """
    Log every request with its status code and response time.
    """
    start_time = time.time()
    response = await call_next(request)
    duration_ms = round((time.time() - start_time) * 1000, 2)

    logger.info(
        "%s %s -> %s (%.2f ms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response
