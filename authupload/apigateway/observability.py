from __future__ import annotations
import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("authupload.apigateway")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_authupload", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._authupload = True  # type: ignore[attr-defined]
        root.addHandler(handler)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = trace_id

        logger.info("request.start request_id=%s method=%s path=%s", request_id, request.method, request.url.path)
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.exception("request.exception request_id=%s trace_id=%s duration_ms=%d",
                             request_id, trace_id, duration_ms)
            raise
        duration_ms = int((time.perf_counter() - start) * 1000)
        response.headers["x-request-id"] = request_id
        response.headers["x-trace-id"] = trace_id
        logger.info("request.end request_id=%s status=%s duration_ms=%d",
                    request_id, response.status_code, duration_ms)
        return response
