"""
Request logging middleware.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from schema_police.utils.logging import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.monotonic()
        delivery_id = request.headers.get("x-github-delivery")

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Unhandled error for {request.method} {request.url.path}",
                extra={"delivery_id": delivery_id},
                exc_info=True
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "delivery_id": delivery_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.monotonic() - start) * 1000, 2),
            }
        )
        return response
