# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/constants.py

Mapeo de tipos de evento de cada proveedor al tipo normalizado.
"""

from app.modules.payments.enums import WebhookEventKind

STRIPE_EVENT_KINDS = {
    "payment_intent.succeeded": WebhookEventKind.CHARGE_SUCCEEDED,
    "payment_intent.payment_failed": WebhookEventKind.CHARGE_FAILED,
    "payment_intent.canceled": WebhookEventKind.ORDER_EXPIRED,
}

CONEKTA_EVENT_KINDS = {
    "order.paid": WebhookEventKind.CHARGE_SUCCEEDED,
    "charge.paid": WebhookEventKind.CHARGE_SUCCEEDED,
    "charge.declined": WebhookEventKind.CHARGE_FAILED,
    "charge.failed": WebhookEventKind.CHARGE_FAILED,
    "order.declined": WebhookEventKind.CHARGE_FAILED,
    "order.expired": WebhookEventKind.ORDER_EXPIRED,
    "charge.expired": WebhookEventKind.ORDER_EXPIRED,
}

STRIPE_SIGNATURE_HEADER = "stripe-signature"
CONEKTA_SIGNATURE_HEADER = "conekta-signature"

__all__ = [
    "STRIPE_EVENT_KINDS",
    "CONEKTA_EVENT_KINDS",
    "STRIPE_SIGNATURE_HEADER",
    "CONEKTA_SIGNATURE_HEADER",
]
