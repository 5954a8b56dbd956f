# 📄 File: substore/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary of every request made to the service: what was asked for, how long it took, and
# whether it failed, tagged with an id so related log lines can be found together.
# 🧪 Purpose (Technical Summary):
# Request logging middleware that assigns or propagates an X-Request-ID, binds it to the logging
# context for the duration of the request, and logs request/response timing.
# 🔗 Dependencies:
# FastAPI/Starlette, substore.shared.utils.logging, uuid, time
# 🔄 Connected Modules / Calls From:
# substore.main (middleware registration)

import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from substore.shared.utils.logging import get_logger, log_context

from . import get_middleware_config, should_exclude_path

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware

    Features:
    - Request id taken from X-Request-ID or generated
    - Request id bound to every log line emitted while handling the request
    - Timing with slow request warnings
    """

    request_id_header = "X-Request-ID"

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        self.slow_request_threshold = get_middleware_config("logging").get("slow_request_threshold", 2.0)

    async def dispatch(self, request: Request, call_next) -> Response:
        """
        Process and log HTTP requests/responses

        Args:
            request: HTTP request
            call_next: Next middleware or endpoint

        Returns:
            HTTP response
        """
        if should_exclude_path("logging", request.url.path):
            return await call_next(request)

        request_id = request.headers.get(self.request_id_header.lower()) or str(uuid.uuid4())
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            start_time = time.perf_counter()
            logger.info(
                f"{request.method} {request.url.path}",
                event_type="http_request",
                method=request.method,
                path=request.url.path,
            )

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} failed: {e}",
                    event_type="http_error",
                    method=request.method,
                    path=request.url.path,
                    processing_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    exc_info=True,
                )
                raise

            processing_time = time.perf_counter() - start_time
            log = logger.warning if processing_time > self.slow_request_threshold else logger.info
            log(
                f"{request.method} {request.url.path} -> {response.status_code}",
                event_type="http_response",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                processing_time_ms=round(processing_time * 1000, 2),
            )

        response.headers[self.request_id_header] = request_id
        return response
