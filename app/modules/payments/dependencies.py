# -*- coding: utf-8 -*-
"""
app/modules/payments/dependencies.py

Construcción de servicios del módulo Payments (inyección de dependencias).

Los servicios no guardan estado por request: se construyen una vez y las
rutas los reciben con `Depends(get_payment_services)`. Las pruebas
sustituyen el registro de pasarelas y el notifier con
`build_payment_services(...)` + `app.dependency_overrides`.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.enrollments.repositories.enrollment_repository import EnrollmentRepository
from app.modules.payments.adapters import GatewayRegistry, build_gateway_registry
from app.modules.payments.repositories import PaymentEventRepository, PaymentRepository
from app.modules.payments.services import (
    IPaymentNotifier,
    PaymentEventService,
    PaymentExpiryService,
    PaymentNotificationDispatcher,
    PaymentService,
    ReconciliationService,
    RefundService,
    build_payment_notifier,
)
from app.modules.payments.services.webhooks import WebhookLedgerService


@dataclass
class PaymentServices:
    reconciliation: ReconciliationService
    payments: PaymentService
    refunds: RefundService
    expiry: PaymentExpiryService
    events: PaymentEventService
    webhooks: WebhookLedgerService
    notifications: PaymentNotificationDispatcher


def build_payment_services(
    *,
    settings: Optional[PaymentsSettings] = None,
    gateway_registry: Optional[GatewayRegistry] = None,
    notifier: Optional[IPaymentNotifier] = None,
) -> PaymentServices:
    settings = settings or get_payments_settings()
    registry = gateway_registry or build_gateway_registry(settings)

    payment_repo = PaymentRepository()
    reconciliation = ReconciliationService(EnrollmentRepository(), payment_repo)
    payments = PaymentService(payment_repo, reconciliation, registry, settings=settings)

    return PaymentServices(
        reconciliation=reconciliation,
        payments=payments,
        refunds=RefundService(payment_repo, reconciliation, registry),
        expiry=PaymentExpiryService(payment_repo, payments, reconciliation, settings=settings),
        events=PaymentEventService(PaymentEventRepository()),
        webhooks=WebhookLedgerService(payment_repo, payments, reconciliation),
        notifications=PaymentNotificationDispatcher(
            notifier or build_payment_notifier(),
            settings=settings,
        ),
    )


@lru_cache
def get_payment_services() -> PaymentServices:
    """Dependencia FastAPI: servicios de pagos (singleton)."""
    return build_payment_services()


__all__ = ["PaymentServices", "build_payment_services", "get_payment_services"]

# Fin del archivo app/modules/payments/dependencies.py
