# 📄 File: flor/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Keeps a diary line for every request made to Flor: what was asked for, how it ended,
# and how long it took, tagged with an id that also goes back to the caller.
# 🧪 Purpose (Technical Summary):
# Request logging middleware that binds a request id to the logging context, times the
# request, logs method/path/status/duration and echoes the id in X-Request-ID.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, flor.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# flor.main (middleware registration), exception handlers (request id in error bodies)

import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from flor.shared.utils.logging import log_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
EXCLUDED_PATHS = {"/health", "/api/v1/health"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Requests slower than ``slow_request_threshold`` seconds are logged
    as warnings.
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        with log_context(request_id=request_id):
            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.exception(f"{request.method} {request.url.path} failed after {duration_ms:.1f}ms")
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            response.headers[REQUEST_ID_HEADER] = request_id

            if request.url.path not in EXCLUDED_PATHS:
                slow = duration_ms > self.slow_request_threshold * 1000
                logger.log(
                    logging.WARNING if slow else logging.INFO,
                    f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": round(duration_ms, 1),
                    }
                )

            return response
