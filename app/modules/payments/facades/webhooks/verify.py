# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/verify.py

Fachada de verificación de firmas: extrae el header correcto
(case-insensitive) y lanza SignatureVerificationError si no es válida.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.shared.errors import SignatureVerificationError
from app.modules.payments.enums import WebhookProvider
from app.modules.payments.metrics import observe_webhook_rejected
from app.modules.payments.services.webhooks.signature_verification import (
    verify_conekta_signature,
    verify_stripe_signature,
)
from .constants import CONEKTA_SIGNATURE_HEADER, STRIPE_SIGNATURE_HEADER

logger = logging.getLogger(__name__)


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def verify_webhook_signature(
    provider: WebhookProvider,
    raw_body: bytes,
    headers: Mapping[str, str],
    settings: Optional[PaymentsSettings] = None,
) -> None:
    """
    Raises:
        SignatureVerificationError: firma ausente o inválida
    """
    if settings is None:
        settings = get_payments_settings()

    if provider == WebhookProvider.STRIPE:
        valid = verify_stripe_signature(
            payload=raw_body,
            signature_header=_get_header(headers, STRIPE_SIGNATURE_HEADER),
            webhook_secret=settings.stripe_webhook_secret,
            tolerance_seconds=settings.stripe_webhook_tolerance_seconds,
        )
    else:
        valid = verify_conekta_signature(
            payload=raw_body,
            signature_header=_get_header(headers, CONEKTA_SIGNATURE_HEADER),
            webhook_secret=settings.conekta_webhook_secret,
        )

    if not valid:
        observe_webhook_rejected(provider.value, "invalid_signature")
        raise SignatureVerificationError(provider.value)


__all__ = ["verify_webhook_signature"]

# Fin del archivo app/modules/payments/facades/webhooks/verify.py
