"""
HTTP middleware that tags each request with a correlation id.
"""
import logging
import time
import uuid

from fastapi import Request

from dbsync.core.logging import request_id_ctx

REQUEST_ID_HEADER = "X-Request-ID"

logger = logging.getLogger("dbsync.requests")


async def request_context_middleware(request: Request, call_next):
    """
    Assign a request id, expose it to logging and echo it back.

    An incoming ``X-Request-ID`` header is reused so callers can correlate
    their own logs with ours.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    token = request_id_ctx.set(request_id)
    start = time.perf_counter()
    try:
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {latency_ms:.1f}ms"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        request_id_ctx.reset(token)
