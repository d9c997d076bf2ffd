# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/payment_repository.py

Repositorio para la tabla payments.

Responsabilidades:
- Búsqueda por id externo de la pasarela (idempotencia de webhooks)
- Historial de pagos de una inscripción (fuente del recálculo de saldo)
- Pagos abiertos vencidos (barrido de expiración)

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional, Sequence

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.models.payment_models import Payment


class PaymentRepository(BaseRepository[Payment]):
    def __init__(self) -> None:
        super().__init__(Payment)

    # -----------------------------------------------------------
    # Búsquedas clave para idempotencia e integración
    # -----------------------------------------------------------
    async def get_by_external_payment_id(
        self,
        session: AsyncSession,
        external_payment_id: str,
        *,
        for_update: bool = False,
    ) -> Optional[Payment]:
        """Obtiene un payment por el id del PaymentIntent / orden en la pasarela."""
        stmt = select(Payment).where(Payment.external_payment_id == external_payment_id)
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_by_transaction_id(
        self,
        session: AsyncSession,
        transaction_id: str,
    ) -> Optional[Payment]:
        stmt = select(Payment).where(Payment.transaction_id == transaction_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    # -----------------------------------------------------------
    # Historial por inscripción
    # -----------------------------------------------------------
    async def list_by_enrollment(
        self,
        session: AsyncSession,
        enrollment_id: uuid.UUID,
        statuses: Optional[Sequence[PaymentStatus]] = None,
    ) -> Sequence[Payment]:
        """Pagos de la inscripción (opcionalmente filtrados por estado), en orden cronológico."""
        stmt = select(Payment).where(Payment.enrollment_id == enrollment_id)
        if statuses:
            stmt = stmt.where(Payment.status.in_(list(statuses)))
        stmt = stmt.order_by(Payment.created_at.asc())
        result = await session.execute(stmt)
        return result.scalars().all()

    # -----------------------------------------------------------
    # Barrido de expiración
    # -----------------------------------------------------------
    async def list_stale_open(
        self,
        session: AsyncSession,
        *,
        now: datetime,
        stale_processing_minutes: int,
        limit: int = 500,
    ) -> Sequence[Payment]:
        """
        Pagos 'pending'/'processing' vencidos:
        - con expires_at en el pasado, o
        - sin vigencia ni id externo (nunca llegaron a la pasarela) y creados
          hace más de stale_processing_minutes.

        Los pagos con id externo y sin expires_at (PaymentIntent de Stripe)
        los cierra el webhook de la pasarela, no el barrido.

        Sin bloqueo: el llamador bloquea inscripción → pago y re-verifica.
        """
        stale_before = now - timedelta(minutes=stale_processing_minutes)
        stmt = (
            select(Payment)
            .where(
                Payment.status.in_([PaymentStatus.PENDING, PaymentStatus.PROCESSING]),
                or_(
                    and_(Payment.expires_at.is_not(None), Payment.expires_at < now),
                    and_(
                        Payment.expires_at.is_(None),
                        Payment.external_payment_id.is_(None),
                        Payment.created_at < stale_before,
                    ),
                ),
            )
            .order_by(Payment.created_at.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


__all__ = ["PaymentRepository"]

# Fin del archivo app/modules/payments/repositories/payment_repository.py
