# -*- coding: utf-8 -*-
"""
app/modules/payments/schemas/refund_schemas.py

Esquemas para reembolsos administrativos.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .payment_schemas import EnrollmentBalanceOut, PaymentOut


class RefundCreate(BaseModel):
    """
    Request de reembolso. El monto se valida en el servicio
    (> 0, máximo 2 decimales, no mayor al pago).
    """

    amount: Decimal = Field(description="Monto a reembolsar en la moneda original del pago.")
    reason: Optional[str] = Field(default=None, max_length=500)


class RefundResult(BaseModel):
    payment: PaymentOut
    enrollment: EnrollmentBalanceOut
    provider_refund_id: Optional[str] = None


__all__ = ["RefundCreate", "RefundResult"]

# Fin del archivo app/modules/payments/schemas/refund_schemas.py
