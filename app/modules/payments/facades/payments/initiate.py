# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/initiate.py

Fachada para iniciar un pago: dueña de la transacción.

Política de commit:
- Éxito (completed / pending / failed por rechazo) → commit.
- PaymentCreationFailed → commit (el intento 'failed' queda registrado
  con su transaction_id) y se relanza.
- Cualquier otro error → rollback y se relanza.
- La notificación se envía después del commit y nunca afecta el resultado.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal
from app.shared.errors import PaymentCreationFailed
from app.modules.payments.adapters import PayerInfo
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.schemas import PaymentCreate
from app.modules.payments.services.payment_service import PaymentOutcome

if TYPE_CHECKING:
    from app.modules.payments.dependencies import PaymentServices

logger = logging.getLogger(__name__)


async def initiate_payment(
    session: AsyncSession,
    *,
    data: PaymentCreate,
    principal: Principal,
    services: "PaymentServices",
) -> PaymentOutcome:
    payer = None
    if data.payer is not None:
        payer = PayerInfo(name=data.payer.name, email=data.payer.email, phone=data.payer.phone)

    try:
        outcome = await services.payments.initiate_payment(
            session,
            principal=principal,
            enrollment_id=data.enrollment_id,
            amount=data.amount,
            channel=data.channel,
            currency=data.currency,
            payment_method=data.payment_method,
            payment_type=data.payment_type,
            description=data.description,
            payment_token=data.payment_token,
            payer=payer,
            installment_number=data.installment_number,
            total_installments=data.total_installments,
        )
    except PaymentCreationFailed:
        await session.commit()
        raise
    except Exception:
        await session.rollback()
        raise

    await session.commit()

    if outcome.payment.status == PaymentStatus.COMPLETED:
        await services.notifications.payment_completed(outcome.payment, outcome.enrollment)
    return outcome


__all__ = ["initiate_payment"]

# Fin del archivo app/modules/payments/facades/payments/initiate.py
