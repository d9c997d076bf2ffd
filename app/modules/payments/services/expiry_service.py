# -*- coding: utf-8 -*-
"""
app/modules/payments/services/expiry_service.py

Barrido de pagos abiertos vencidos (OXXO/SPEI sin confirmar, 'processing'
abandonados). Cada pago vencido pasa a 'failed' con motivo 'expired' y se
recalcula el saldo de su inscripción.

Autor: Equipo Backend Escolar
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.utils.datetime_helpers import ensure_utc, utcnow
from app.modules.payments.enums import PaymentStatus
from app.modules.payments.metrics import observe_expired_payments
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.services.payment_service import PaymentService
from app.modules.payments.services.reconciliation_service import ReconciliationService

logger = logging.getLogger(__name__)


@dataclass
class ExpirySweepResult:
    expired_payment_ids: List[uuid.UUID] = field(default_factory=list)
    enrollment_ids: List[uuid.UUID] = field(default_factory=list)

    @property
    def expired(self) -> int:
        return len(self.expired_payment_ids)


class PaymentExpiryService:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        payment_service: PaymentService,
        reconciliation_service: ReconciliationService,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.payment_repo = payment_repo
        self.payment_service = payment_service
        self.reconciliation_service = reconciliation_service
        self.settings = settings or get_payments_settings()

    def _is_stale(self, payment, now: datetime) -> bool:
        if payment.expires_at is not None:
            return ensure_utc(payment.expires_at) < now
        if payment.external_payment_id:
            # Sin vigencia propia: el desenlace llega por webhook
            return False
        age = now - ensure_utc(payment.created_at)
        return age.total_seconds() > self.settings.stale_processing_minutes * 60

    async def expire_stale_payments(
        self,
        session: AsyncSession,
        *,
        now: Optional[datetime] = None,
        limit: int = 500,
    ) -> ExpirySweepResult:
        """
        Marca como 'failed' (expired) los pagos abiertos vencidos.
        Solo hace flush; el commit es del llamador.
        """
        now = ensure_utc(now) if now else utcnow()
        result = ExpirySweepResult()

        candidates = await self.payment_repo.list_stale_open(
            session,
            now=now,
            stale_processing_minutes=self.settings.stale_processing_minutes,
            limit=limit,
        )
        for candidate in candidates:
            payment_id, enrollment_id = candidate.id, candidate.enrollment_id

            await self.reconciliation_service.lock_enrollment(session, enrollment_id)
            payment = await self.payment_repo.get_for_update(session, payment_id)
            # Un webhook pudo resolverlo entre la consulta y el bloqueo
            if payment is None or not payment.status.is_open or not self._is_stale(payment, now):
                continue

            self.payment_service.mark_failed(payment, "expired")
            await self.reconciliation_service.apply_payment(session, enrollment_id)

            result.expired_payment_ids.append(payment_id)
            if enrollment_id not in result.enrollment_ids:
                result.enrollment_ids.append(enrollment_id)

        observe_expired_payments(result.expired)
        if result.expired:
            logger.info(
                "Barrido de expiración: %s pagos vencidos en %s inscripciones",
                result.expired,
                len(result.enrollment_ids),
            )
        return result


__all__ = ["PaymentExpiryService", "ExpirySweepResult"]

# Fin del archivo app/modules/payments/services/expiry_service.py
