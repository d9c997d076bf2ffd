# -*- coding: utf-8 -*-
"""
app/shared/middleware/exception_handler.py

Manejo de errores HTTP de la aplicación.

- JSONExceptionMiddleware: captura excepciones no manejadas y responde
  JSON estructurado (nunca text/plain) con error_code y request_id.
- register_exception_handlers: traduce DomainError a su status HTTP
  con cuerpo {"detail": {"error_code", "message", ...}}.

Autor: Equipo Backend Escolar
Fecha: 2026-03-03
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable

from fastapi import FastAPI
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.shared.errors import DomainError

logger = logging.getLogger(__name__)

# Headers aceptados como request ID (proxy, balanceador, cliente)
REQUEST_ID_HEADERS = ["x-request-id", "x-correlation-id"]


def get_request_id(request: Request) -> str:
    """Extrae request_id de headers o genera uno nuevo."""
    for header in REQUEST_ID_HEADERS:
        value = request.headers.get(header)
        if value:
            return value
    return uuid.uuid4().hex[:16]


class JSONExceptionMiddleware(BaseHTTPMiddleware):
    """
    Middleware que captura excepciones no manejadas y devuelve JSON 500.

    Garantiza:
    - Content-Type: application/json
    - error_code estable para UI
    - request_id para correlación de logs
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = get_request_id(request)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "unhandled_exception request_id=%s method=%s path=%s error=%r",
                request_id,
                request.method,
                request.url.path,
                e,
            )
            detail = {
                "error_code": "INTERNAL_SERVER_ERROR",
                "message": "Internal server error",
                "request_id": request_id,
            }
            return JSONResponse(
                status_code=500,
                content={"detail": detail},
                headers={"X-Request-ID": request_id},
            )

        response.headers["X-Request-ID"] = request_id
        return response


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Traduce un DomainError a su respuesta JSON."""
    detail = exc.to_detail()
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        detail["request_id"] = request_id

    log = logger.warning if exc.http_status >= 500 else logger.info
    log(
        "domain_error code=%s status=%s path=%s msg=%s",
        exc.error_code,
        exc.http_status,
        request.url.path,
        exc.message,
    )
    return JSONResponse(status_code=exc.http_status, content={"detail": detail})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]


__all__ = [
    "JSONExceptionMiddleware",
    "get_request_id",
    "domain_error_handler",
    "register_exception_handlers",
]
