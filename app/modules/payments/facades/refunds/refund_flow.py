# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/refunds/refund_flow.py

Entrada de alto nivel para reembolsos administrativos.

Commit solo si el procesador y el ledger quedaron consistentes; ante
cualquier error (incluido GatewayError) rollback y se relanza, de modo
que el pago sigue 'completed' y el saldo no cambia.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal
from app.modules.payments.services.refund_service import RefundOutcome

if TYPE_CHECKING:
    from app.modules.payments.dependencies import PaymentServices


async def process_refund(
    session: AsyncSession,
    *,
    payment_id: uuid.UUID,
    amount: Decimal,
    reason: Optional[str],
    principal: Principal,
    services: "PaymentServices",
) -> RefundOutcome:
    try:
        outcome = await services.refunds.refund(
            session,
            payment_id=payment_id,
            amount=amount,
            reason=reason,
            principal=principal,
        )
    except Exception:
        await session.rollback()
        raise

    await session.commit()
    await services.notifications.payment_refunded(outcome.payment, outcome.enrollment)
    return outcome


__all__ = ["process_refund"]

# Fin del archivo app/modules/payments/facades/refunds/refund_flow.py
