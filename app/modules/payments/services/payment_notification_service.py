# -*- coding: utf-8 -*-
"""
app/modules/payments/services/payment_notification_service.py

Colaborador de notificaciones de pago.

Se invoca DESPUÉS del commit, en modo fire-and-forget: una falla al
notificar se loguea y nunca revierte ni interrumpe la operación de pago.
Con EMAIL_MODE=console solo se loguea; con EMAIL_MODE=smtp se envía
correo al pagador.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Protocol

from app.shared.config.settings_base import BaseAppSettings
from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.integrations.email_sender import IEmailSender, build_email_sender

if TYPE_CHECKING:
    from app.modules.enrollments.models.enrollment_models import Enrollment
    from app.modules.payments.models.payment_models import Payment

logger = logging.getLogger(__name__)


class IPaymentNotifier(Protocol):
    """Protocolo para implementaciones de notificación de pagos."""
    async def payment_completed(self, payment: "Payment", enrollment: "Enrollment") -> None: ...
    async def payment_refunded(self, payment: "Payment", enrollment: "Enrollment") -> None: ...


class LoggingPaymentNotifier:
    """Implementación que no envía nada; solo hace logging."""

    async def payment_completed(self, payment: "Payment", enrollment: "Enrollment") -> None:
        logger.info(
            f"[NOTIFY] Pago recibido → estudiante={enrollment.student_id} "
            f"monto={payment.amount} {payment.currency} recibo={payment.receipt_number}"
        )

    async def payment_refunded(self, payment: "Payment", enrollment: "Enrollment") -> None:
        logger.info(
            f"[NOTIFY] Reembolso → estudiante={enrollment.student_id} "
            f"monto={payment.refund_amount} {payment.currency} txn={payment.transaction_id}"
        )


class EmailPaymentNotifier:
    """
    Envía el aviso por correo al pagador registrado en el metadata del pago
    (`payer_email`). Sin destinatario no se envía nada.
    """

    def __init__(self, sender: IEmailSender) -> None:
        self.sender = sender

    async def payment_completed(self, payment: "Payment", enrollment: "Enrollment") -> None:
        to_email = (payment.payment_metadata or {}).get("payer_email")
        if not to_email:
            logger.info("Pago %s sin payer_email; se omite correo", payment.transaction_id)
            return
        text = (
            f"Recibimos tu pago de {payment.amount} {payment.currency.value}.\n"
            f"Recibo: {payment.receipt_number}\n"
            f"Referencia: {payment.transaction_id}\n"
            f"Saldo pendiente de la inscripción: {enrollment.remaining_amount}\n"
        )
        await self.sender.send_email(to_email, "Pago recibido", text)

    async def payment_refunded(self, payment: "Payment", enrollment: "Enrollment") -> None:
        to_email = (payment.payment_metadata or {}).get("payer_email")
        if not to_email:
            logger.info("Pago %s sin payer_email; se omite correo", payment.transaction_id)
            return
        text = (
            f"Se reembolsaron {payment.refund_amount} {payment.currency.value} "
            f"del pago {payment.transaction_id}.\n"
            f"Motivo: {payment.refund_reason or '-'}\n"
        )
        await self.sender.send_email(to_email, "Reembolso procesado", text)


def build_payment_notifier(settings: Optional[BaseAppSettings] = None) -> IPaymentNotifier:
    """Notifier según EMAIL_MODE: console → logging, smtp → correo."""
    if settings is None:
        from app.shared.config import get_settings
        settings = get_settings()
    if settings.email_mode == "smtp":
        return EmailPaymentNotifier(build_email_sender(settings))
    return LoggingPaymentNotifier()


class PaymentNotificationDispatcher:
    """
    Envoltura fire-and-forget sobre un IPaymentNotifier.
    Respeta las banderas notify_payment_* de la configuración.
    """

    def __init__(
        self,
        notifier: Optional[IPaymentNotifier] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.notifier = notifier or LoggingPaymentNotifier()
        self.settings = settings or get_payments_settings()

    async def payment_completed(self, payment: "Payment", enrollment: "Enrollment") -> None:
        if not self.settings.notify_payment_completed:
            return
        try:
            await self.notifier.payment_completed(payment, enrollment)
        except Exception:
            logger.warning(
                "Falló notificación de pago completado txn=%s",
                payment.transaction_id,
                exc_info=True,
            )

    async def payment_refunded(self, payment: "Payment", enrollment: "Enrollment") -> None:
        if not self.settings.notify_payment_refunded:
            return
        try:
            await self.notifier.payment_refunded(payment, enrollment)
        except Exception:
            logger.warning(
                "Falló notificación de reembolso txn=%s",
                payment.transaction_id,
                exc_info=True,
            )


__all__ = [
    "IPaymentNotifier",
    "LoggingPaymentNotifier",
    "EmailPaymentNotifier",
    "build_payment_notifier",
    "PaymentNotificationDispatcher",
]

# Fin del archivo app/modules/payments/services/payment_notification_service.py
