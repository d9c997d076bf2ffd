# -*- coding: utf-8 -*-
"""
app/modules/payments/services/refund_service.py

Servicio de reembolsos.

Flujo:
1. Validar monto y existencia del pago.
2. Bloquear inscripción y luego el pago (mismo orden que webhooks).
3. Re-verificar que el pago siga 'completed' y que el monto no lo exceda.
4. Reembolsar en la pasarela (Stripe/Conekta) ANTES de tocar nada local;
   si la pasarela falla, el GatewayError se propaga y el ledger queda intacto.
5. Marcar el pago 'refunded' y recalcular el saldo de la inscripción.

La política es conservar la fila original: el aporte del pago al saldo
pasa a ser amount - refund_amount.

Autor: Equipo Backend Escolar
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal, ensure_admin
from app.shared.errors import GatewayError, InvalidStateError, NotFoundError, ValidationError
from app.shared.utils.datetime_helpers import utcnow
from app.modules.payments.adapters import GatewayRegistry, RefundResult
from app.modules.payments.enums import PaymentMethod, PaymentStatus
from app.modules.payments.metrics import observe_refund
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.services.reconciliation_service import ReconciliationService
from app.modules.payments.utils.money import has_at_most_two_decimals, to_money

if TYPE_CHECKING:
    from app.modules.enrollments.models.enrollment_models import Enrollment
    from app.modules.payments.models.payment_models import Payment

logger = logging.getLogger(__name__)

# Métodos que se reembolsan en el procesador
GATEWAY_REFUND_METHODS = frozenset({PaymentMethod.STRIPE, PaymentMethod.CONEKTA})


@dataclass
class RefundOutcome:
    payment: "Payment"
    enrollment: "Enrollment"
    provider_refund_id: Optional[str] = None


class RefundService:
    """
    Servicio de reembolsos: integra procesador, pago y saldo de la inscripción.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        reconciliation_service: ReconciliationService,
        gateway_registry: GatewayRegistry,
    ) -> None:
        self.payment_repo = payment_repo
        self.reconciliation_service = reconciliation_service
        self.gateway_registry = gateway_registry

    async def refund(
        self,
        session: AsyncSession,
        *,
        payment_id: uuid.UUID,
        amount: Decimal,
        reason: Optional[str],
        principal: Principal,
    ) -> RefundOutcome:
        """
        Reembolsa (total o parcialmente) un pago completado.

        Raises:
            PermissionDeniedError: el principal no es administrador
            ValidationError: monto no positivo o con más de 2 decimales
            NotFoundError: el pago no existe
            InvalidStateError: el pago no está completado o el monto lo excede
            GatewayError: el procesador rechazó o no respondió
        """
        ensure_admin(principal)

        if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
            raise ValidationError("El monto del reembolso debe ser mayor a cero")
        if not has_at_most_two_decimals(amount):
            raise ValidationError("El monto admite máximo 2 decimales")
        amount = to_money(amount)

        payment = await self.payment_repo.get(session, payment_id)
        if payment is None:
            raise NotFoundError("Pago", payment_id)

        # Orden de bloqueo: inscripción → pago
        await self.reconciliation_service.lock_enrollment(session, payment.enrollment_id)
        payment = await self.payment_repo.get_for_update(session, payment_id)
        if payment is None:
            raise NotFoundError("Pago", payment_id)

        if payment.status != PaymentStatus.COMPLETED:
            raise InvalidStateError("payment is not completed", current_state=payment.status.value)
        if amount > payment.amount:
            raise InvalidStateError(
                "refund amount exceeds payment amount",
                current_state=payment.status.value,
            )

        result = await self._refund_at_processor(payment, amount, reason)

        payment.status = PaymentStatus.REFUNDED
        payment.refund_amount = amount
        payment.refund_reason = reason
        payment.refunded_by = principal.user_id
        payment.refunded_at = utcnow()
        if result is not None:
            payment.payment_metadata = {
                **(payment.payment_metadata or {}),
                "refund_id": result.provider_refund_id,
                "refund_status": result.status,
            }
        await session.flush()

        enrollment = await self.reconciliation_service.apply_payment(session, payment.enrollment_id)

        observe_refund(payment.payment_method.value, "succeeded")
        logger.info(
            "Reembolso aplicado txn=%s monto=%s de %s por=%s",
            payment.transaction_id,
            amount,
            payment.amount,
            principal.user_id,
        )
        return RefundOutcome(
            payment=payment,
            enrollment=enrollment,
            provider_refund_id=result.provider_refund_id if result else None,
        )

    async def _refund_at_processor(
        self,
        payment: "Payment",
        amount: Decimal,
        reason: Optional[str],
    ) -> Optional[RefundResult]:
        if payment.payment_method not in GATEWAY_REFUND_METHODS:
            return None

        if not payment.external_payment_id:
            raise InvalidStateError(
                "El pago no tiene referencia en el procesador",
                current_state=payment.status.value,
            )

        adapter = self.gateway_registry.for_refund(payment.payment_method)
        if adapter is None:
            raise InvalidStateError(
                f"Sin procesador configurado para reembolsar {payment.payment_method.value}",
                current_state=payment.status.value,
            )

        try:
            return await adapter.refund(
                external_id=payment.external_payment_id,
                amount=amount,
                currency=payment.currency,
                reason=reason,
                idempotency_key=f"refund-{payment.transaction_id}",
            )
        except GatewayError:
            observe_refund(payment.payment_method.value, "gateway_error")
            logger.error(
                "Procesador rechazó reembolso txn=%s external=%s",
                payment.transaction_id,
                payment.external_payment_id,
            )
            raise


__all__ = ["RefundService", "RefundOutcome", "GATEWAY_REFUND_METHODS"]

# Fin del archivo app/modules/payments/services/refund_service.py
