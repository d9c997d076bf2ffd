# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/refunds.py

Reembolsos administrativos.

Endpoint:
- POST /payments/{payment_id}/refund

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal, require_admin
from app.shared.database.database import get_async_session
from app.modules.payments.dependencies import PaymentServices, get_payment_services
from app.modules.payments.facades.refunds import process_refund
from app.modules.payments.schemas import (
    EnrollmentBalanceOut,
    PaymentOut,
    RefundCreate,
    RefundResult,
)

router = APIRouter(tags=["payments:refunds"])


@router.post("/{payment_id}/refund", response_model=RefundResult)
async def refund_payment(
    payment_id: uuid.UUID,
    data: RefundCreate,
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> RefundResult:
    outcome = await process_refund(
        session,
        payment_id=payment_id,
        amount=data.amount,
        reason=data.reason,
        principal=principal,
        services=services,
    )
    return RefundResult(
        payment=PaymentOut.model_validate(outcome.payment),
        enrollment=EnrollmentBalanceOut.model_validate(outcome.enrollment),
        provider_refund_id=outcome.provider_refund_id,
    )


__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/refunds.py
