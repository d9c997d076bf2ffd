# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/__init__.py

Adaptadores de pasarela (manual, Stripe, Conekta).
"""

from .base import (
    ChargeRequest,
    GatewayAdapter,
    GatewayOutcome,
    GatewayResult,
    PayerInfo,
    RefundResult,
)
from .registry import GatewayRegistry, build_gateway_registry

__all__ = [
    "ChargeRequest",
    "GatewayAdapter",
    "GatewayOutcome",
    "GatewayResult",
    "PayerInfo",
    "RefundResult",
    "GatewayRegistry",
    "build_gateway_registry",
]
