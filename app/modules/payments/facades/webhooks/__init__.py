# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/__init__.py

Fachada de webhooks: verificación, normalización y manejo.
"""

from .handler import handle_webhook
from .normalize import NormalizedWebhook, WebhookNormalizationError, normalize_webhook_payload
from .verify import verify_webhook_signature

__all__ = [
    "handle_webhook",
    "NormalizedWebhook",
    "WebhookNormalizationError",
    "normalize_webhook_payload",
    "verify_webhook_signature",
]
