# -*- coding: utf-8 -*-
"""
app/modules/payments/routes/payments.py

Endpoints de pagos:
- POST /payments                 iniciar pago (manual o pasarela)
- GET  /payments/{payment_id}    consultar pago
- POST /payments/sweep/expire    barrido de pagos vencidos (admin)

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal, get_current_principal, require_admin
from app.shared.database.database import get_async_session
from app.modules.payments.dependencies import PaymentServices, get_payment_services
from app.modules.payments.facades.payments import initiate_payment, run_expiry_sweep
from app.modules.payments.schemas import (
    EnrollmentBalanceOut,
    ExpirySweepOut,
    PaymentCreate,
    PaymentOut,
    PaymentResult,
)

router = APIRouter(tags=["payments"])


@router.post("", response_model=PaymentResult, status_code=status.HTTP_201_CREATED)
async def create_payment(
    data: PaymentCreate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> PaymentResult:
    """
    Inicia un pago. Un rechazo de tarjeta se registra y devuelve el pago
    'failed'; OXXO/SPEI devuelven 'pending' con referencia y vigencia.
    """
    outcome = await initiate_payment(session, data=data, principal=principal, services=services)
    return PaymentResult(
        payment=PaymentOut.model_validate(outcome.payment),
        enrollment=EnrollmentBalanceOut.model_validate(outcome.enrollment),
    )


@router.post("/sweep/expire", response_model=ExpirySweepOut)
async def expire_stale_payments(
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> ExpirySweepOut:
    result = await run_expiry_sweep(session, services=services)
    return ExpirySweepOut(
        expired=result.expired,
        expired_payment_ids=result.expired_payment_ids,
        enrollment_ids=result.enrollment_ids,
    )


@router.get("/{payment_id}", response_model=PaymentOut)
async def get_payment(
    payment_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_async_session),
    services: PaymentServices = Depends(get_payment_services),
) -> PaymentOut:
    payment = await services.payments.get_payment_for(session, payment_id, principal)
    return PaymentOut.model_validate(payment)


__all__ = ["router"]

# Fin del archivo app/modules/payments/routes/payments.py
