# -*- coding: utf-8 -*-
"""
app/modules/payments/services/webhooks/payload_sanitizer.py

Payload seguro para persistir en payment_events.

Nunca se guarda el webhook completo (trae nombre, correo y teléfono del
pagador). Solo se conservan:
- CORE FIELDS por proveedor (ids, monto, moneda, estado, metadata.enrollment_id)
- HASH SHA256 del cuerpo original para trazabilidad

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


CORE_FIELD_MAPPINGS: Dict[str, Dict[str, list[str]]] = {
    "stripe": {
        "event_id": ["id"],
        "event_type": ["type"],
        "object_id": ["data.object.id"],
        "amount": ["data.object.amount_received", "data.object.amount"],
        "currency": ["data.object.currency"],
        "status": ["data.object.status"],
        "failure_code": ["data.object.last_payment_error.code"],
        "enrollment_id": ["data.object.metadata.enrollment_id"],
        "livemode": ["livemode"],
    },
    "conekta": {
        "event_id": ["id"],
        "event_type": ["type"],
        "object_id": ["data.object.id"],
        "order_id": ["data.object.order_id"],
        "amount": ["data.object.amount"],
        "currency": ["data.object.currency"],
        "status": ["data.object.payment_status", "data.object.status"],
        "failure_code": ["data.object.failure_code"],
        "enrollment_id": ["data.object.metadata.enrollment_id"],
        "livemode": ["livemode"],
    },
}


def compute_payload_hash(raw_payload: bytes | str | dict) -> str:
    if isinstance(raw_payload, dict):
        payload_bytes = json.dumps(raw_payload, sort_keys=True).encode("utf-8")
    elif isinstance(raw_payload, str):
        payload_bytes = raw_payload.encode("utf-8")
    else:
        payload_bytes = raw_payload
    return hashlib.sha256(payload_bytes).hexdigest()


def get_nested_value(data: Any, path: str) -> Optional[Any]:
    """Valor anidado por notación de punto ("data.object.amount")."""
    current = data
    for key in path.split("."):
        if isinstance(current, dict):
            current = current.get(key)
        elif isinstance(current, list):
            try:
                current = current[int(key)]
            except (ValueError, IndexError):
                return None
        else:
            return None
        if current is None:
            return None
    return current


def sanitize_webhook_payload(
    provider: str,
    payload: Dict[str, Any],
    *,
    raw_payload: bytes | str | None = None,
) -> Dict[str, Any]:
    """Extrae los core fields del proveedor y agrega el hash del original."""
    mappings = CORE_FIELD_MAPPINGS.get(provider.lower(), {})

    safe_payload: Dict[str, Any] = {}
    for key, paths in mappings.items():
        for path in paths:
            value = get_nested_value(payload, path)
            if value is not None:
                safe_payload[key] = value
                break

    safe_payload["__provider__"] = provider.lower()
    safe_payload["__payload_hash__"] = compute_payload_hash(
        raw_payload if raw_payload is not None else payload
    )
    logger.debug(
        "Payload %s sanitizado: %s campos originales -> %s",
        provider,
        len(payload),
        len(safe_payload),
    )
    return safe_payload


__all__ = [
    "sanitize_webhook_payload",
    "compute_payload_hash",
    "get_nested_value",
    "CORE_FIELD_MAPPINGS",
]

# Fin del archivo app/modules/payments/services/webhooks/payload_sanitizer.py
