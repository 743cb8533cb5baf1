"""
Core module - logging setup and request correlation.
"""
from dbsync.core.logging import request_id_ctx, setup_logging
from dbsync.core.request_context import REQUEST_ID_HEADER, request_context_middleware

__all__ = [
    "setup_logging",
    "request_id_ctx",
    "request_context_middleware",
    "REQUEST_ID_HEADER",
]
