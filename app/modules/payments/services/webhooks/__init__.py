# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/__init__.py

Servicios de webhooks: firmas, sanitización y aplicación al ledger.
"""

from .signature_verification import (
    verify_stripe_signature,
    verify_conekta_signature,
    build_stripe_signature_header,
    build_conekta_signature_header,
)
from .payload_sanitizer import sanitize_webhook_payload, compute_payload_hash
from .webhook_service import WebhookLedgerService, WebhookApplyResult, WebhookOutcome

__all__ = [
    "verify_stripe_signature",
    "verify_conekta_signature",
    "build_stripe_signature_header",
    "build_conekta_signature_header",
    "sanitize_webhook_payload",
    "compute_payload_hash",
    "WebhookLedgerService",
    "WebhookApplyResult",
    "WebhookOutcome",
]
