# -*- coding: utf-8 -*-
"""
app/routes/master_routes.py

Router maestro: todo el API de negocio vive bajo /api.

  /api/enrollments/...
  /api/payments/...
  /api/payments/webhooks/{stripe,conekta}

Autor: Equipo Backend Escolar
Fecha: 2026-03-09
"""
from __future__ import annotations

import logging

from fastapi import APIRouter

from app.modules.enrollments.routes import router as enrollments_router
from app.modules.payments.routes import router as payments_router

logger = logging.getLogger(__name__)

api = APIRouter(prefix="/api")

_loaded: list[str] = []


def _include(target: APIRouter, router: APIRouter, name: str) -> None:
    """Incluye un router en la capa dada y deja trazabilidad en logs."""
    target.include_router(router)
    _loaded.append(f"{target.prefix or '/'}:{name}")
    logger.debug("Router '%s' montado en prefix '%s'", name, target.prefix or "/")


_include(api, enrollments_router, "enrollments")
_include(api, payments_router, "payments")

__all__ = ["api"]

# Fin del archivo app/routes/master_routes.py
