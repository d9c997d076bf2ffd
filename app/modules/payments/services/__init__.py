# -*- coding: utf-8 -*-
"""
app/modules/payments/services/__init__.py

Superficie de exportación de servicios del módulo Payments.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from .reconciliation_service import ReconciliationService, derive_payment_status
from .payment_service import PaymentService, PaymentOutcome
from .refund_service import RefundService, RefundOutcome
from .expiry_service import PaymentExpiryService, ExpirySweepResult
from .payment_event_service import PaymentEventService
from .payment_notification_service import (
    IPaymentNotifier,
    LoggingPaymentNotifier,
    EmailPaymentNotifier,
    PaymentNotificationDispatcher,
    build_payment_notifier,
)

__all__ = [
    "ReconciliationService",
    "derive_payment_status",
    "PaymentService",
    "PaymentOutcome",
    "RefundService",
    "RefundOutcome",
    "PaymentExpiryService",
    "ExpirySweepResult",
    "PaymentEventService",
    "IPaymentNotifier",
    "LoggingPaymentNotifier",
    "EmailPaymentNotifier",
    "PaymentNotificationDispatcher",
    "build_payment_notifier",
]

# Fin del archivo app/modules/payments/services/__init__.py
