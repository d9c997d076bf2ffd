# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/manual_adapter.py

Canal manual: efectivo, terminal bancaria o transferencia capturados
por un administrador. Síncrono y siempre 'completed'.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from app.modules.payments.enums import Currency
from .base import ChargeRequest, GatewayOutcome, GatewayResult, RefundResult

logger = logging.getLogger(__name__)


class ManualAdapter:
    provider = "manual"

    async def charge(self, request: ChargeRequest) -> GatewayResult:
        logger.info(
            "Pago manual registrado txn=%s método=%s monto=%s %s",
            request.transaction_id,
            request.payment_method.value,
            request.amount,
            request.currency.value,
        )
        return GatewayResult(outcome=GatewayOutcome.COMPLETED)

    async def refund(
        self,
        *,
        external_id: str,
        amount: Decimal,
        currency: Currency,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> RefundResult:
        # La devolución de efectivo/transferencia ocurre fuera del sistema
        return RefundResult(provider_refund_id=None, status="manual")


__all__ = ["ManualAdapter"]
