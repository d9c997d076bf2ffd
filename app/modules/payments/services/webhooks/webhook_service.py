# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/webhook_service.py

Aplicación de un webhook ya verificado y normalizado sobre el ledger.

Reglas:
- El pago se busca por external_payment_id (llave de idempotencia).
- Sin fila + charge_succeeded → se crea el pago 'completed' con el monto
  del evento y metadata.enrollment_id (sin exigir inscripción activa).
- Sin fila + fallo/expiración → se ignora.
- Fila en estado terminal → duplicado, sin cambios.
- Fila abierta → completed / failed(declined) / failed(expired) y
  recálculo del saldo en la misma transacción.

Solo hace flush. Una carrera en la creación perezosa termina en
IntegrityError por el unique de external_payment_id; la fachada hace
rollback y lo reporta como duplicado.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.payments.enums import (
    Currency,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    WebhookEventKind,
    WebhookProvider,
)
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.services.payment_service import PaymentService
from app.modules.payments.services.reconciliation_service import ReconciliationService
from app.modules.payments.utils.identifiers import generate_transaction_id
from app.modules.payments.utils.money import to_money

if TYPE_CHECKING:
    from app.modules.enrollments.models.enrollment_models import Enrollment
    from app.modules.payments.facades.webhooks.normalize import NormalizedWebhook
    from app.modules.payments.models.payment_models import Payment

logger = logging.getLogger(__name__)

PROVIDER_METHOD = {
    WebhookProvider.STRIPE: PaymentMethod.STRIPE,
    WebhookProvider.CONEKTA: PaymentMethod.CONEKTA,
}


class WebhookOutcome(StrEnum):
    PROCESSED = "processed"
    CREATED = "created"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"
    ERROR = "error"


@dataclass
class WebhookApplyResult:
    outcome: WebhookOutcome
    payment: Optional["Payment"] = None
    enrollment: Optional["Enrollment"] = None

    @property
    def completed(self) -> bool:
        return (
            self.outcome in (WebhookOutcome.PROCESSED, WebhookOutcome.CREATED)
            and self.payment is not None
            and self.payment.status == PaymentStatus.COMPLETED
        )


class WebhookLedgerService:
    def __init__(
        self,
        payment_repo: PaymentRepository,
        payment_service: PaymentService,
        reconciliation_service: ReconciliationService,
    ) -> None:
        self.payment_repo = payment_repo
        self.payment_service = payment_service
        self.reconciliation_service = reconciliation_service

    async def apply_event(self, session: AsyncSession, event: "NormalizedWebhook") -> WebhookApplyResult:
        if event.kind == WebhookEventKind.IGNORED or not event.external_id:
            return WebhookApplyResult(WebhookOutcome.IGNORED)

        payment = await self.payment_repo.get_by_external_payment_id(session, event.external_id)
        if payment is None:
            if event.kind != WebhookEventKind.CHARGE_SUCCEEDED:
                logger.info(
                    "Webhook %s %s sin pago local para %s; se ignora",
                    event.provider.value,
                    event.event_type,
                    event.external_id,
                )
                return WebhookApplyResult(WebhookOutcome.IGNORED)
            return await self._create_from_event(session, event)

        # Orden de bloqueo: inscripción → pago
        enrollment_id = payment.enrollment_id
        await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        payment = await self.payment_repo.get_for_update(session, payment.id)

        if payment.status.is_terminal:
            logger.info(
                "Webhook %s duplicado: pago %s ya está %s",
                event.event_id,
                payment.transaction_id,
                payment.status.value,
            )
            return WebhookApplyResult(WebhookOutcome.DUPLICATE, payment=payment)

        if event.kind == WebhookEventKind.CHARGE_SUCCEEDED:
            self.payment_service.mark_completed(payment)
        elif event.kind == WebhookEventKind.CHARGE_FAILED:
            self.payment_service.mark_failed(payment, "declined", detail=event.failure_reason)
        else:
            self.payment_service.mark_failed(payment, "expired", detail=event.failure_reason)

        enrollment = await self.reconciliation_service.apply_payment(session, enrollment_id)
        logger.info(
            "Webhook %s aplicado: pago %s → %s",
            event.event_id,
            payment.transaction_id,
            payment.status.value,
        )
        return WebhookApplyResult(WebhookOutcome.PROCESSED, payment=payment, enrollment=enrollment)

    async def _create_from_event(self, session: AsyncSession, event: "NormalizedWebhook") -> WebhookApplyResult:
        """Crea el pago 'completed' de un cobro que no se originó aquí."""
        enrollment_id = _parse_uuid(event.enrollment_id)
        if enrollment_id is None or event.amount is None or event.amount <= 0:
            logger.warning(
                "Webhook %s sin enrollment_id/monto válido para crear pago (external=%s)",
                event.event_id,
                event.external_id,
            )
            return WebhookApplyResult(WebhookOutcome.IGNORED)

        currency = _parse_currency(event.currency)
        if currency is None:
            logger.warning(
                "Webhook %s con moneda no soportada %r; no se crea pago (external=%s)",
                event.event_id,
                event.currency,
                event.external_id,
            )
            return WebhookApplyResult(WebhookOutcome.IGNORED)

        await self.reconciliation_service.lock_enrollment(session, enrollment_id)

        # Otra transacción pudo crearlo mientras esperábamos el bloqueo
        existing = await self.payment_repo.get_by_external_payment_id(session, event.external_id)
        if existing is not None:
            return WebhookApplyResult(WebhookOutcome.DUPLICATE, payment=existing)

        payment = await self.payment_repo.create(
            session,
            enrollment_id=enrollment_id,
            amount=to_money(event.amount),
            currency=currency,
            payment_method=PROVIDER_METHOD[event.provider],
            payment_type=PaymentType.PARTIAL,
            status=PaymentStatus.PROCESSING,
            transaction_id=generate_transaction_id(),
            external_payment_id=event.external_id,
            description=f"Pago confirmado por webhook {event.provider.value}",
            payment_metadata={"source": "webhook", "event_id": event.event_id},
        )
        self.payment_service.mark_completed(payment)
        await session.flush()

        enrollment = await self.reconciliation_service.apply_payment(session, enrollment_id)
        logger.info(
            "Pago %s creado desde webhook %s (external=%s monto=%s)",
            payment.transaction_id,
            event.event_id,
            event.external_id,
            payment.amount,
        )
        return WebhookApplyResult(WebhookOutcome.CREATED, payment=payment, enrollment=enrollment)


def _parse_uuid(value: Optional[str]) -> Optional[uuid.UUID]:
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def _parse_currency(value: Optional[str]) -> Optional[Currency]:
    """Sin moneda en el evento se asume MXN; una moneda desconocida es None."""
    if not value:
        return Currency.MXN
    try:
        return Currency(value.upper())
    except ValueError:
        return None


__all__ = ["WebhookLedgerService", "WebhookApplyResult", "WebhookOutcome"]

# Fin del archivo app/modules/payments/services/webhooks/webhook_service.py
