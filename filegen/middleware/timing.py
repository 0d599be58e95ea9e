"""Request timing middleware for performance monitoring."""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from filegen.core.logging import get_logger

logger = get_logger(__name__)

SLOW_REQUEST_THRESHOLD_MS = 500  # Configurable threshold

JOB_ID_HEADER = "X-Job-ID"


class TimingMiddleware(BaseHTTPMiddleware):
    """Time each request and log slow ones.

    Generation responses also log their job ID and payload size. For
    streamed downloads the duration only covers the time until headers
    are ready; the job's own log events cover the body transfer.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000

        log_data = {
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": round(duration_ms, 2),
        }

        job_id = response.headers.get(JOB_ID_HEADER)
        if job_id:
            log_data["job_id"] = job_id
            content_length = response.headers.get("Content-Length")
            if content_length and content_length.isdigit():
                log_data["payload_bytes"] = int(content_length)

        if duration_ms > SLOW_REQUEST_THRESHOLD_MS:
            logger.warning("slow_request", **log_data)
        else:
            logger.debug("request_timing", **log_data)

        response.headers["X-Response-Time-Ms"] = str(round(duration_ms, 2))

        return response
