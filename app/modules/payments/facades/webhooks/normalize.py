# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/webhooks/normalize.py

Normalización de payloads de webhooks de Stripe y Conekta.

Convierte el evento de cada proveedor a un DTO interno con el tipo
normalizado (charge_succeeded / charge_failed / order_expired / ignored),
el id externo del cobro (PaymentIntent u orden Conekta) y el monto.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""
from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from app.modules.payments.enums import WebhookEventKind, WebhookProvider
from app.modules.payments.utils.money import from_cents
from .constants import CONEKTA_EVENT_KINDS, STRIPE_EVENT_KINDS

logger = logging.getLogger(__name__)


class NormalizedWebhook(BaseModel):
    """DTO normalizado para eventos de webhook de cualquier proveedor."""

    provider: WebhookProvider
    event_id: str = Field(description="ID único del evento en el proveedor")
    event_type: str = Field(description="Tipo de evento original del proveedor")
    kind: WebhookEventKind = WebhookEventKind.IGNORED

    external_id: Optional[str] = Field(
        default=None,
        description="PaymentIntent (Stripe) u orden (Conekta); llave de idempotencia",
    )
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    enrollment_id: Optional[str] = Field(default=None, description="metadata.enrollment_id")
    failure_reason: Optional[str] = None

    raw: Dict[str, Any] = Field(default_factory=dict)


class WebhookNormalizationError(ValueError):
    """Payload que no se puede interpretar."""


def _amount_from_cents(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return from_cents(int(value))
    except (TypeError, ValueError):
        return None


def _normalize_stripe_event(data: Dict[str, Any]) -> NormalizedWebhook:
    event_type = data.get("type", "")
    event_object = (data.get("data") or {}).get("object") or {}
    metadata = event_object.get("metadata") or {}
    last_error = event_object.get("last_payment_error") or {}

    return NormalizedWebhook(
        provider=WebhookProvider.STRIPE,
        event_id=str(data.get("id")),
        event_type=event_type,
        kind=STRIPE_EVENT_KINDS.get(event_type, WebhookEventKind.IGNORED),
        external_id=event_object.get("id"),
        amount=_amount_from_cents(event_object.get("amount_received") or event_object.get("amount")),
        currency=(event_object.get("currency") or "").upper() or None,
        enrollment_id=metadata.get("enrollment_id"),
        failure_reason=last_error.get("code") or event_object.get("cancellation_reason"),
        raw=data,
    )


def _normalize_conekta_event(data: Dict[str, Any]) -> NormalizedWebhook:
    event_type = data.get("type", "")
    event_object = (data.get("data") or {}).get("object") or {}
    metadata = event_object.get("metadata") or {}

    # Los eventos charge.* traen el id de la orden en order_id
    if event_type.startswith("charge."):
        external_id = event_object.get("order_id")
    else:
        external_id = event_object.get("id")

    return NormalizedWebhook(
        provider=WebhookProvider.CONEKTA,
        event_id=str(data.get("id")),
        event_type=event_type,
        kind=CONEKTA_EVENT_KINDS.get(event_type, WebhookEventKind.IGNORED),
        external_id=external_id,
        amount=_amount_from_cents(event_object.get("amount")),
        currency=(event_object.get("currency") or "").upper() or None,
        enrollment_id=metadata.get("enrollment_id"),
        failure_reason=event_object.get("failure_code") or event_object.get("failure_message"),
        raw=data,
    )


def normalize_webhook_payload(provider: WebhookProvider, raw_body: bytes) -> NormalizedWebhook:
    """
    Normaliza el body crudo de un webhook.

    Raises:
        WebhookNormalizationError: JSON inválido o sin id/type
    """
    try:
        data = json.loads(raw_body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise WebhookNormalizationError(f"Invalid JSON payload: {e}") from e

    if not isinstance(data, dict):
        raise WebhookNormalizationError("Payload must be a JSON object")
    if not data.get("id") or not data.get("type"):
        raise WebhookNormalizationError(f"Invalid {provider.value} webhook: missing 'type' or 'id'")

    if provider == WebhookProvider.STRIPE:
        normalized = _normalize_stripe_event(data)
    else:
        normalized = _normalize_conekta_event(data)

    if normalized.kind == WebhookEventKind.IGNORED:
        logger.info(f"Evento {provider.value} no manejado: {normalized.event_type}")
    return normalized


__all__ = [
    "normalize_webhook_payload",
    "NormalizedWebhook",
    "WebhookNormalizationError",
]

# Fin del archivo app/modules/payments/facades/webhooks/normalize.py
