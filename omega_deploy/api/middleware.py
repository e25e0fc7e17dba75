"""Logging middleware for FastAPI."""

import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from omega_deploy.infrastructure.logging.logger import get_logger


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request with its duration and a generated request ID."""

    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.logger = get_logger(__name__)

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        if self.log_requests:
            self.logger.info(
                "HTTP request",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.time() - start_time) * 1000, 2)
            )
        response.headers["X-Request-ID"] = request_id
        return response
