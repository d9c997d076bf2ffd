# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/__init__.py

Ensamblador de rutas REST del módulo Payments.

Incluye:
- /payments
- /payments/{payment_id}
- /payments/{payment_id}/refund
- /payments/sweep/expire
- /payments/webhooks/stripe
- /payments/webhooks/conekta

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from fastapi import APIRouter

from .payments import router as payments_router
from .refunds import router as refunds_router
from .webhooks import router as webhooks_router

router = APIRouter()

# Webhooks primero: /webhooks/... no debe caer en /{payment_id}
router.include_router(webhooks_router, prefix="/payments")
router.include_router(refunds_router, prefix="/payments")
router.include_router(payments_router, prefix="/payments")

__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/__init__.py
