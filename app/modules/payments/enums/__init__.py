# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/__init__.py

Superficie de exportación de enums del módulo Payments.
"""

from .currency_enum import Currency
from .gateway_channel_enum import GatewayChannel
from .payment_method_enum import PaymentMethod
from .payment_status_enum import (
    PaymentStatus,
    SETTLED_PAYMENT_STATUSES,
    TERMINAL_PAYMENT_STATUSES,
)
from .payment_type_enum import PaymentType
from .webhook_event_kind_enum import WebhookEventKind
from .webhook_provider_enum import WebhookProvider

__all__ = [
    "Currency",
    "GatewayChannel",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    "SETTLED_PAYMENT_STATUSES",
    "TERMINAL_PAYMENT_STATUSES",
    "WebhookEventKind",
    "WebhookProvider",
]

# Fin del archivo app/modules/payments/enums/__init__.py
