"""Structured JSON access log.

Every request logs one line:
{request_id, path, method, status_code, latency_ms}
at error/warning/info level depending on the status class.
"""
from __future__ import annotations

import json
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger("structured_access")

_QUIET_PATHS = ("/health", "/api/health")


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start = time.monotonic()
        response = await call_next(request)
        latency_ms = round((time.monotonic() - start) * 1000, 2)

        path = request.url.path
        if path.startswith(_QUIET_PATHS):
            return response

        log_entry = {
            "request_id": getattr(request.state, "correlation_id", None),
            "path": path,
            "method": request.method,
            "status_code": response.status_code,
            "latency_ms": latency_ms,
        }

        if response.status_code >= 500:
            logger.error(json.dumps(log_entry))
        elif response.status_code >= 400:
            logger.warning(json.dumps(log_entry))
        else:
            logger.info(json.dumps(log_entry))

        return response
