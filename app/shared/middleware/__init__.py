# -*- coding: utf-8 -*-
"""
app/shared/middleware/__init__.py

Módulo de middlewares compartidos.
"""

from .exception_handler import (
    JSONExceptionMiddleware,
    get_request_id,
    register_exception_handlers,
)
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "JSONExceptionMiddleware",
    "RequestLoggingMiddleware",
    "get_request_id",
    "register_exception_handlers",
]
