# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/signature_verification.py

Verificación de firmas de webhooks (Stripe y Conekta).

- Stripe: header `Stripe-Signature: t=<ts>,v1=<hmac>`; HMAC-SHA256 de
  "<ts>.<body>" con el webhook secret y tolerancia de timestamp.
- Conekta: header `Conekta-Signature`; HMAC-SHA256 hex del body crudo con
  el webhook secret (se acepta prefijo "sha256=").

IMPORTANTE:
- El bypass inseguro SOLO funciona en PYTHON_ENV=development con
  PAYMENTS_ALLOW_INSECURE_WEBHOOKS=true. En test y producción nunca.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""
from __future__ import annotations

import hashlib
import hmac
import logging
import os
import time
from typing import Dict, Optional

from app.shared.config.settings_payments import get_payments_settings

logger = logging.getLogger(__name__)


# =============================================================================
# ENVIRONMENT CHECKS
# =============================================================================

def _is_development_environment() -> bool:
    """
    Solo en desarrollo se permite el bypass de verificación.
    "test" NO es desarrollo: los tests deben ser fail-closed.
    """
    python_env = os.getenv("PYTHON_ENV", "production").lower()
    return python_env in ("development", "dev", "local")


def _allow_insecure() -> bool:
    if os.getenv("PYTHON_ENV", "production").lower() == "test":
        return False

    allow_flag = get_payments_settings().allow_insecure_webhooks
    if not allow_flag:
        return False

    if not _is_development_environment():
        logger.error(
            "SECURITY VIOLATION: PAYMENTS_ALLOW_INSECURE_WEBHOOKS=true en entorno "
            "no-desarrollo. Ignorando flag y forzando verificación real."
        )
        return False

    logger.warning(
        "DESARROLLO: Verificación de webhooks deshabilitada. "
        "Esto NUNCA debe ocurrir en producción."
    )
    return True


def _hmac_sha256_hex(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), msg=message, digestmod=hashlib.sha256).hexdigest()


# =============================================================================
# STRIPE
# =============================================================================

def verify_stripe_signature(
    payload: bytes,
    signature_header: Optional[str],
    webhook_secret: Optional[str] = None,
    tolerance_seconds: Optional[int] = None,
    *,
    now: Optional[int] = None,
) -> bool:
    """
    Verifica la firma de un webhook de Stripe.

    Returns:
        True si la firma es válida, False en caso contrario
    """
    if _allow_insecure():
        return True

    settings = get_payments_settings()
    if webhook_secret is None:
        webhook_secret = settings.stripe_webhook_secret
    if tolerance_seconds is None:
        tolerance_seconds = settings.stripe_webhook_tolerance_seconds

    if not signature_header:
        logger.warning("Stripe webhook rechazado: falta header Stripe-Signature")
        return False
    if not webhook_secret:
        logger.error("Stripe webhook rechazado: STRIPE_WEBHOOK_SECRET no configurado.")
        return False

    # "t=timestamp,v1=firma,v0=firma_vieja"
    elements: Dict[str, list] = {}
    for item in signature_header.split(","):
        item = item.strip()
        if "=" in item:
            key, value = item.split("=", 1)
            elements.setdefault(key, []).append(value)

    timestamp_str = elements.get("t", [None])[0]
    signatures_v1 = elements.get("v1", [])
    if not timestamp_str or not signatures_v1:
        logger.warning("Stripe webhook rechazado: header sin timestamp o firma v1")
        return False

    try:
        timestamp = int(timestamp_str)
    except ValueError:
        logger.warning("Stripe webhook rechazado: timestamp inválido %r", timestamp_str)
        return False

    current = int(time.time()) if now is None else now
    if abs(current - timestamp) > tolerance_seconds:
        logger.warning(
            f"Stripe webhook rechazado: timestamp fuera de tolerancia. "
            f"Diferencia: {abs(current - timestamp)}s, tolerancia: {tolerance_seconds}s"
        )
        return False

    expected = _hmac_sha256_hex(webhook_secret, f"{timestamp}.".encode("utf-8") + payload)
    for sig in signatures_v1:
        if hmac.compare_digest(expected, sig):
            return True

    logger.warning("Stripe webhook rechazado: ninguna firma v1 coincide")
    return False


def build_stripe_signature_header(payload: bytes, secret: str, timestamp: Optional[int] = None) -> str:
    """Header Stripe-Signature válido (herramientas locales y pruebas de integración)."""
    ts = int(time.time()) if timestamp is None else timestamp
    return f"t={ts},v1={_hmac_sha256_hex(secret, f'{ts}.'.encode('utf-8') + payload)}"


# =============================================================================
# CONEKTA
# =============================================================================

def verify_conekta_signature(
    payload: bytes,
    signature_header: Optional[str],
    webhook_secret: Optional[str] = None,
) -> bool:
    """
    Verifica la firma de un webhook de Conekta.

    Returns:
        True si la firma es válida, False en caso contrario
    """
    if _allow_insecure():
        return True

    if webhook_secret is None:
        webhook_secret = get_payments_settings().conekta_webhook_secret

    if not signature_header:
        logger.warning("Conekta webhook rechazado: falta header Conekta-Signature")
        return False
    if not webhook_secret:
        logger.error("Conekta webhook rechazado: CONEKTA_WEBHOOK_SECRET no configurado.")
        return False

    received = signature_header.strip()
    if received.lower().startswith("sha256="):
        received = received.split("=", 1)[1]

    expected = _hmac_sha256_hex(webhook_secret, payload)
    if hmac.compare_digest(expected, received.lower()):
        return True

    logger.warning("Conekta webhook rechazado: firma no coincide")
    return False


def build_conekta_signature_header(payload: bytes, secret: str) -> str:
    return _hmac_sha256_hex(secret, payload)


__all__ = [
    "verify_stripe_signature",
    "verify_conekta_signature",
    "build_stripe_signature_header",
    "build_conekta_signature_header",
]

# Fin del archivo app/modules/payments/services/webhooks/signature_verification.py
