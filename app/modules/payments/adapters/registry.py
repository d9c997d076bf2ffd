# -*- coding: utf-8 -*-
"""
app/modules/payments/adapters/registry.py

Selección de adaptador por canal (GatewayChannel) y por método
almacenado (para reembolsos de pagos existentes).

Autor: Equipo Backend Escolar
Fecha: 2026-03-06
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.payments.enums import GatewayChannel, PaymentMethod
from .base import GatewayAdapter
from .conekta_adapter import ConektaAdapter
from .conekta_client import ConektaClient
from .manual_adapter import ManualAdapter
from .stripe_adapter import StripeCardAdapter


class GatewayRegistry:
    def __init__(self, adapters: Mapping[GatewayChannel, GatewayAdapter]) -> None:
        self._adapters: Dict[GatewayChannel, GatewayAdapter] = dict(adapters)

    def for_channel(self, channel: GatewayChannel) -> GatewayAdapter:
        try:
            return self._adapters[channel]
        except KeyError:
            raise LookupError(f"Sin adaptador para el canal {channel}") from None

    def for_refund(self, method: PaymentMethod) -> Optional[GatewayAdapter]:
        """Adaptador que reembolsa pagos del método dado; None si es manual."""
        if method == PaymentMethod.STRIPE:
            return self._adapters.get(GatewayChannel.STRIPE_CARD)
        if method == PaymentMethod.CONEKTA:
            return self._adapters.get(GatewayChannel.CONEKTA_CARD)
        return None


def build_gateway_registry(settings: Optional[PaymentsSettings] = None) -> GatewayRegistry:
    settings = settings or get_payments_settings()
    conekta_client = ConektaClient(settings)
    return GatewayRegistry({
        GatewayChannel.MANUAL: ManualAdapter(),
        GatewayChannel.STRIPE_CARD: StripeCardAdapter(settings),
        GatewayChannel.CONEKTA_CARD: ConektaAdapter(GatewayChannel.CONEKTA_CARD, conekta_client, settings),
        GatewayChannel.CONEKTA_OXXO: ConektaAdapter(GatewayChannel.CONEKTA_OXXO, conekta_client, settings),
        GatewayChannel.CONEKTA_SPEI: ConektaAdapter(GatewayChannel.CONEKTA_SPEI, conekta_client, settings),
    })


__all__ = ["GatewayRegistry", "build_gateway_registry"]
