# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/base.py

Contrato común de los adaptadores de pasarela.

Cada canal (manual, Stripe tarjeta, Conekta tarjeta/OXXO/SPEI) recibe un
ChargeRequest y devuelve un GatewayResult normalizado:

- completed: el cargo quedó liquidado dentro del request
- pending:   cargo creado; lo resuelve un webhook (o el barrido de vigencia)
- failed:    rechazo definitivo (declinada); se registra, no se reintenta

Errores de red, timeouts o fallas del procesador se lanzan como
GatewayError (app.shared.errors); nunca como un resultado 'failed'.

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any, Dict, Optional, Protocol

from app.modules.payments.enums import Currency, GatewayChannel, PaymentMethod


class GatewayOutcome(StrEnum):
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


@dataclass(frozen=True)
class PayerInfo:
    """Datos del pagador que exigen algunas pasarelas (Conekta customer_info)."""
    name: str
    email: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class ChargeRequest:
    """Solicitud de cobro normalizada, independiente del canal."""
    channel: GatewayChannel
    transaction_id: str
    enrollment_id: str
    amount: Decimal
    currency: Currency
    description: str
    payment_method: PaymentMethod
    payment_token: Optional[str] = None
    payer: Optional[PayerInfo] = None
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass
class GatewayResult:
    """Resultado normalizado de un cobro."""
    outcome: GatewayOutcome
    external_id: Optional[str] = None
    reference: Optional[str] = None
    expires_at: Optional[datetime] = None
    failure_reason: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class RefundResult:
    """Resultado de un reembolso en la pasarela."""
    provider_refund_id: Optional[str]
    status: str
    raw: Dict[str, Any] = field(default_factory=dict)


class GatewayAdapter(Protocol):
    """Protocolo de adaptadores de pasarela."""

    provider: str

    async def charge(self, request: ChargeRequest) -> GatewayResult: ...

    async def refund(
        self,
        *,
        external_id: str,
        amount: Decimal,
        currency: Currency,
        reason: Optional[str] = None,
        idempotency_key: Optional[str] = None,
    ) -> RefundResult: ...


__all__ = [
    "GatewayOutcome",
    "PayerInfo",
    "ChargeRequest",
    "GatewayResult",
    "RefundResult",
    "GatewayAdapter",
]
