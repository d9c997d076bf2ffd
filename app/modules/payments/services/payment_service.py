# -*- coding: utf-8 -*-
"""
app/modules/payments/services/payment_service.py

Servicio de alto nivel para pagos.

Flujos cubiertos:
- Iniciar un pago por canal (manual, Stripe, Conekta tarjeta/OXXO/SPEI)
- Transiciones de estado: completed / failed / pending
- Conciliación del saldo de la inscripción tras cada pago liquidado

Contrato con la pasarela:
1. Se valida la solicitud y se bloquea la inscripción (debe estar 'active').
2. Se escribe la fila 'processing' con transaction_id ANTES del cobro.
3. El resultado de la pasarela se aplica sobre esa misma fila.
4. GatewayError → fila 'failed' (processor_unavailable) y PaymentCreationFailed.

El servicio solo hace flush; el commit lo decide la fachada.

Autor: Equipo Backend Escolar
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.auth_context import Principal
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import (
    GatewayError,
    InvalidStateError,
    NotFoundError,
    PaymentCreationFailed,
    PermissionDeniedError,
    ValidationError,
)
from app.shared.utils.datetime_helpers import utcnow
from app.modules.enrollments.enums import EnrollmentStatus
from app.modules.payments.adapters import (
    ChargeRequest,
    GatewayOutcome,
    GatewayRegistry,
    GatewayResult,
    PayerInfo,
)
from app.modules.payments.enums import (
    Currency,
    GatewayChannel,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from app.modules.payments.metrics import observe_payment_initiated
from app.modules.payments.repositories.payment_repository import PaymentRepository
from app.modules.payments.services.reconciliation_service import ReconciliationService
from app.modules.payments.utils.identifiers import generate_receipt_number, generate_transaction_id
from app.modules.payments.utils.money import has_at_most_two_decimals, to_cents, to_money

if TYPE_CHECKING:
    from app.modules.enrollments.models.enrollment_models import Enrollment
    from app.modules.payments.models.payment_models import Payment

logger = logging.getLogger(__name__)

# Métodos que un administrador puede capturar por el canal manual
MANUAL_METHODS = frozenset({PaymentMethod.CASH, PaymentMethod.CARD, PaymentMethod.TRANSFER})

# Método almacenado según el canal de pasarela
CHANNEL_METHOD = {
    GatewayChannel.STRIPE_CARD: PaymentMethod.STRIPE,
    GatewayChannel.CONEKTA_CARD: PaymentMethod.CONEKTA,
    GatewayChannel.CONEKTA_OXXO: PaymentMethod.CONEKTA,
    GatewayChannel.CONEKTA_SPEI: PaymentMethod.CONEKTA,
}

TOKEN_CHANNELS = frozenset({GatewayChannel.STRIPE_CARD, GatewayChannel.CONEKTA_CARD})
CONEKTA_CHANNELS = frozenset({
    GatewayChannel.CONEKTA_CARD,
    GatewayChannel.CONEKTA_OXXO,
    GatewayChannel.CONEKTA_SPEI,
})


@dataclass
class PaymentOutcome:
    """Pago resultante y la inscripción ya conciliada."""
    payment: "Payment"
    enrollment: "Enrollment"


class PaymentService:
    """
    Servicio para gestionar el ciclo de vida de un pago y su
    efecto en el saldo de la inscripción.
    """

    def __init__(
        self,
        payment_repo: PaymentRepository,
        reconciliation_service: ReconciliationService,
        gateway_registry: GatewayRegistry,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.payment_repo = payment_repo
        self.reconciliation_service = reconciliation_service
        self.gateway_registry = gateway_registry
        self.settings = settings or get_payments_settings()

    # ------------------------------------------------------------------ #
    # Consultas
    # ------------------------------------------------------------------ #
    async def get_payment(self, session: AsyncSession, payment_id: uuid.UUID) -> "Payment":
        payment = await self.payment_repo.get(session, payment_id)
        if payment is None:
            raise NotFoundError("Pago", payment_id)
        return payment

    async def get_payment_for(
        self,
        session: AsyncSession,
        payment_id: uuid.UUID,
        principal: Principal,
    ) -> "Payment":
        """Pago visible para admin, el estudiante dueño o el docente de la inscripción."""
        payment = await self.get_payment(session, payment_id)
        if principal.is_admin:
            return payment

        enrollment = await self.reconciliation_service.enrollment_repo.get(session, payment.enrollment_id)
        if enrollment is None or principal.user_id not in (enrollment.student_id, enrollment.teacher_id):
            raise PermissionDeniedError("Sin acceso a este pago")
        return payment

    # ------------------------------------------------------------------ #
    # Validaciones
    # ------------------------------------------------------------------ #
    def validate_amount(self, amount: Decimal) -> Decimal:
        if not isinstance(amount, Decimal) or not amount.is_finite():
            raise ValidationError("El monto debe ser decimal")
        if amount <= 0:
            raise ValidationError("El monto debe ser mayor a cero")
        if not has_at_most_two_decimals(amount):
            raise ValidationError("El monto admite máximo 2 decimales")

        cents = to_cents(amount)
        if cents < self.settings.min_payment_amount_cents:
            raise ValidationError("El monto es menor al mínimo permitido")
        if cents > self.settings.max_payment_amount_cents:
            raise ValidationError("El monto excede el máximo permitido")
        return to_money(amount)

    @staticmethod
    def resolve_method(channel: GatewayChannel, payment_method: Optional[PaymentMethod]) -> PaymentMethod:
        """Método a almacenar; valida la coherencia canal/método."""
        if payment_method == PaymentMethod.PAYPAL:
            raise ValidationError("PayPal no está disponible para pagos nuevos")

        if channel == GatewayChannel.MANUAL:
            if payment_method not in MANUAL_METHODS:
                raise ValidationError("El canal manual requiere método cash, card o transfer")
            return payment_method  # type: ignore[return-value]

        expected = CHANNEL_METHOD[channel]
        if payment_method is not None and payment_method != expected:
            raise ValidationError(f"El canal {channel.value} solo admite el método {expected.value}")
        return expected

    # ------------------------------------------------------------------ #
    # Iniciar pago
    # ------------------------------------------------------------------ #
    async def initiate_payment(
        self,
        session: AsyncSession,
        *,
        principal: Principal,
        enrollment_id: uuid.UUID,
        amount: Decimal,
        channel: GatewayChannel,
        currency: Currency = Currency.MXN,
        payment_method: Optional[PaymentMethod] = None,
        payment_type: PaymentType = PaymentType.PARTIAL,
        description: Optional[str] = None,
        payment_token: Optional[str] = None,
        payer: Optional[PayerInfo] = None,
        installment_number: Optional[int] = None,
        total_installments: Optional[int] = None,
    ) -> PaymentOutcome:
        """
        Cobra por el canal indicado y aplica el resultado al ledger.

        Raises:
            ValidationError: monto/canal/método inválidos
            PermissionDeniedError: el principal no puede pagar esta inscripción
            NotFoundError: la inscripción no existe
            InvalidStateError: la inscripción no está activa
            PaymentCreationFailed: la pasarela no respondió (fila queda 'failed')
        """
        amount = self.validate_amount(amount)
        method = self.resolve_method(channel, payment_method)

        if payment_type == PaymentType.REFUND:
            raise ValidationError("Los reembolsos se registran con la operación de reembolso")
        if channel in TOKEN_CHANNELS and not payment_token:
            raise ValidationError("El canal requiere payment_token")
        if channel in CONEKTA_CHANNELS and payer is None:
            raise ValidationError("Conekta requiere datos del pagador (nombre y correo)")
        if installment_number is not None and total_installments is not None:
            if not 1 <= installment_number <= total_installments:
                raise ValidationError("Número de parcialidad fuera de rango")

        if not principal.is_admin and channel == GatewayChannel.MANUAL:
            raise PermissionDeniedError("Solo administradores registran pagos manuales")

        enrollment = await self.reconciliation_service.lock_enrollment(session, enrollment_id)
        if not principal.is_admin and enrollment.student_id != principal.user_id:
            raise PermissionDeniedError("La inscripción no pertenece al usuario")
        if enrollment.status != EnrollmentStatus.ACTIVE:
            raise InvalidStateError(
                "La inscripción no está activa",
                current_state=enrollment.status.value,
            )

        transaction_id = generate_transaction_id()
        description = description or f"Pago de inscripción {enrollment_id}"
        payment = await self.payment_repo.create(
            session,
            enrollment_id=enrollment_id,
            amount=amount,
            currency=currency,
            payment_method=method,
            payment_type=payment_type,
            status=PaymentStatus.PROCESSING,
            transaction_id=transaction_id,
            description=description,
            installment_number=installment_number,
            total_installments=total_installments,
            processed_by=principal.user_id,
            payment_metadata=self._initial_metadata(channel, payer),
        )
        logger.info(
            "Pago %s creado en processing enrollment=%s canal=%s monto=%s %s",
            transaction_id,
            enrollment_id,
            channel.value,
            amount,
            currency.value,
        )

        adapter = self.gateway_registry.for_channel(channel)
        request = ChargeRequest(
            channel=channel,
            transaction_id=transaction_id,
            enrollment_id=str(enrollment_id),
            amount=amount,
            currency=currency,
            description=description,
            payment_method=method,
            payment_token=payment_token,
            payer=payer,
            metadata={"student_id": str(enrollment.student_id), "course_id": str(enrollment.course_id)},
        )

        try:
            result = await adapter.charge(request)
        except GatewayError as e:
            self.mark_failed(payment, "processor_unavailable", detail=e.message)
            await session.flush()
            observe_payment_initiated(channel.value, "error")
            logger.error(
                "Pasarela %s no disponible para txn=%s (transient=%s)",
                e.provider,
                transaction_id,
                e.transient,
            )
            raise PaymentCreationFailed("processor_unavailable", transaction_id=transaction_id) from e

        self.apply_gateway_result(payment, result, channel=channel)
        await session.flush()
        observe_payment_initiated(channel.value, result.outcome.value)

        if payment.status == PaymentStatus.COMPLETED:
            enrollment = await self.reconciliation_service.apply_payment(session, enrollment_id)

        return PaymentOutcome(payment=payment, enrollment=enrollment)

    # ------------------------------------------------------------------ #
    # Transiciones
    # ------------------------------------------------------------------ #
    def apply_gateway_result(
        self,
        payment: "Payment",
        result: GatewayResult,
        *,
        channel: GatewayChannel,
    ) -> "Payment":
        if result.external_id:
            payment.external_payment_id = result.external_id

        if result.outcome == GatewayOutcome.COMPLETED:
            return self.mark_completed(payment)

        if result.outcome == GatewayOutcome.PENDING:
            payment.status = PaymentStatus.PENDING
            payment.payment_reference = result.reference
            payment.expires_at = result.expires_at or self._default_expiry(channel)
            logger.info(
                "Pago %s pendiente ref=%s vence=%s",
                payment.transaction_id,
                payment.payment_reference,
                payment.expires_at,
            )
            return payment

        return self.mark_failed(payment, result.failure_reason or "declined")

    @staticmethod
    def _initial_metadata(channel: GatewayChannel, payer: Optional[PayerInfo]) -> dict:
        metadata: dict = {"channel": channel.value}
        if payer is not None and payer.email:
            # destinatario de las notificaciones por correo
            metadata["payer_email"] = payer.email
            metadata["payer_name"] = payer.name
        return metadata

    def _default_expiry(self, channel: GatewayChannel) -> Optional[datetime]:
        if channel == GatewayChannel.CONEKTA_OXXO:
            return utcnow() + timedelta(hours=self.settings.oxxo_expiry_hours)
        if channel == GatewayChannel.CONEKTA_SPEI:
            return utcnow() + timedelta(hours=self.settings.spei_expiry_hours)
        return None

    def mark_completed(self, payment: "Payment", *, paid_at: Optional[datetime] = None) -> "Payment":
        """
        Marca el pago como COMPLETED y emite recibo.
        Idempotente: si ya está completed/refunded no hace nada.
        """
        if payment.status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED):
            return payment

        now = paid_at or utcnow()
        payment.status = PaymentStatus.COMPLETED
        payment.paid_at = now
        payment.failure_reason = None
        if not payment.receipt_number:
            payment.receipt_number = generate_receipt_number(now)
        logger.info("Pago %s completado recibo=%s", payment.transaction_id, payment.receipt_number)
        return payment

    def mark_failed(self, payment: "Payment", reason: str, *, detail: Optional[str] = None) -> "Payment":
        """
        Marca el pago como FAILED.
        No aplica sobre estados terminales.
        """
        if payment.status.is_terminal:
            return payment

        payment.status = PaymentStatus.FAILED
        payment.failure_reason = reason
        metadata = dict(payment.payment_metadata or {})
        errors = list(metadata.get("errors", []))
        errors.append({"reason": reason, "detail": detail, "at": utcnow().isoformat()})
        metadata["errors"] = errors
        payment.payment_metadata = metadata
        logger.info("Pago %s marcado failed (%s)", payment.transaction_id, reason)
        return payment


__all__ = [
    "PaymentService",
    "PaymentOutcome",
    "MANUAL_METHODS",
    "CHANNEL_METHOD",
]

# Fin del archivo app/modules/payments/services/payment_service.py
