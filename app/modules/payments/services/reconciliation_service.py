# -*- coding: utf-8 -*-
"""
app/modules/payments/services/reconciliation_service.py

Motor de conciliación del saldo de una inscripción.

Regla única (recalcular, nunca incrementar):

    aporte(p)      = p.amount - p.refund_amount   para p.status ∈ {completed, refunded}
    total_pagado   = Σ aporte(p)
    restante       = total_amount - discount_amount - total_pagado
    payment_status = completed si restante <= 0
                     partial   si total_pagado > 0   (overdue si venció next_payment_date)
                     pending   en otro caso

Es el ÚNICO escritor de paid_amount / payment_status / discount_amount.
Bloquea la fila de la inscripción (SELECT ... FOR UPDATE) dentro de la
transacción del llamador y recalcula desde el historial completo, por lo
que aplicar dos veces produce el mismo resultado.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.errors import InvalidStateError, NotFoundError, ValidationError
from app.shared.utils.datetime_helpers import utcnow, utctoday
from app.modules.enrollments.enums import EnrollmentPaymentStatus, EnrollmentStatus
from app.modules.enrollments.models.enrollment_models import Enrollment
from app.modules.enrollments.repositories.enrollment_repository import EnrollmentRepository
from app.modules.payments.enums import SETTLED_PAYMENT_STATUSES
from app.modules.payments.metrics import observe_reconciliation
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.utils.money import ZERO, has_at_most_two_decimals, sum_money, to_money

logger = logging.getLogger(__name__)


def derive_payment_status(
    *,
    net_amount: Decimal,
    total_paid: Decimal,
    next_payment_date: Optional[date] = None,
    today: Optional[date] = None,
) -> EnrollmentPaymentStatus:
    """Estado del saldo como función pura del monto neto y lo pagado."""
    remaining = net_amount - total_paid
    if remaining <= 0:
        return EnrollmentPaymentStatus.COMPLETED
    if total_paid > 0:
        if next_payment_date is not None and next_payment_date < (today or utctoday()):
            return EnrollmentPaymentStatus.OVERDUE
        return EnrollmentPaymentStatus.PARTIAL
    return EnrollmentPaymentStatus.PENDING


class ReconciliationService:
    def __init__(
        self,
        enrollment_repo: EnrollmentRepository,
        payment_repo: PaymentRepository,
    ) -> None:
        self.enrollment_repo = enrollment_repo
        self.payment_repo = payment_repo

    # ---------------------------------------------------------
    # Bloqueo
    # ---------------------------------------------------------
    async def lock_enrollment(self, session: AsyncSession, enrollment_id: uuid.UUID) -> Enrollment:
        """Bloquea la inscripción hasta el fin de la transacción."""
        # autoflush=False: los cambios pendientes deben llegar a la BD antes de releer
        await session.flush()
        enrollment = await self.enrollment_repo.get_for_update(session, enrollment_id)
        if enrollment is None:
            raise NotFoundError("Inscripción", enrollment_id)
        return enrollment

    # ---------------------------------------------------------
    # Recalcular saldo
    # ---------------------------------------------------------
    async def apply_payment(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        *,
        today: Optional[date] = None,
    ) -> Enrollment:
        """
        Recalcula paid_amount / payment_status de la inscripción desde su
        historial de pagos y los persiste (flush, sin commit).

        Raises:
            NotFoundError: si la inscripción no existe
        """
        enrollment = await self.lock_enrollment(session, enrollment_id)

        settled = await self.payment_repo.list_by_enrollment(
            session,
            enrollment_id,
            statuses=list(SETTLED_PAYMENT_STATUSES),
        )
        total_paid = sum_money(p.contribution for p in settled)
        net_amount = to_money(enrollment.total_amount) - to_money(enrollment.discount_amount or ZERO)

        payment_status = derive_payment_status(
            net_amount=net_amount,
            total_paid=total_paid,
            next_payment_date=enrollment.next_payment_date,
            today=today,
        )

        previous = (enrollment.paid_amount, enrollment.payment_status)
        enrollment.paid_amount = total_paid
        enrollment.payment_status = payment_status
        enrollment.last_payment_date = utcnow()
        await session.flush()

        observe_reconciliation(payment_status.value)
        logger.info(
            "Conciliación enrollment=%s pagado=%s restante=%s estado=%s (antes: %s/%s)",
            enrollment_id,
            total_paid,
            net_amount - total_paid,
            payment_status.value,
            previous[0],
            previous[1],
        )
        return enrollment

    # ---------------------------------------------------------
    # Descuento (único camino que cambia discount_amount)
    # ---------------------------------------------------------
    async def apply_discount(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        *,
        amount: Decimal,
        reason: str,
    ) -> Enrollment:
        """Fija el descuento total de la inscripción y recalcula el saldo."""
        if not isinstance(amount, Decimal) or amount < 0 or not has_at_most_two_decimals(amount):
            raise ValidationError("El descuento debe ser un monto >= 0 con máximo 2 decimales")
        if not reason or not reason.strip():
            raise ValidationError("El descuento requiere un motivo")

        enrollment = await self.lock_enrollment(session, enrollment_id)
        if enrollment.status == EnrollmentStatus.CANCELLED:
            raise InvalidStateError(
                "No se puede aplicar descuento a una inscripción cancelada",
                current_state=enrollment.status.value,
            )
        if amount > enrollment.total_amount:
            raise ValidationError("El descuento no puede exceder el monto total")

        enrollment.discount_amount = to_money(amount)
        enrollment.discount_reason = reason.strip()
        logger.info("Descuento %s aplicado a enrollment=%s (%s)", amount, enrollment_id, reason)
        return await self.apply_payment(session, enrollment_id)

    # ---------------------------------------------------------
    # Mantenimiento
    # ---------------------------------------------------------
    async def recompute_all(self, session: AsyncSession) -> int:
        """Recalcula el saldo de todas las inscripciones. Devuelve cuántas procesó."""
        count = 0
        for enrollment_id in await self.enrollment_repo.list_ids(session):
            await self.apply_payment(session, enrollment_id)
            count += 1
        logger.info("Recálculo masivo de saldos: %s inscripciones", count)
        return count


__all__ = ["ReconciliationService", "derive_payment_status"]

# Fin del archivo app/modules/payments/services/reconciliation_service.py
