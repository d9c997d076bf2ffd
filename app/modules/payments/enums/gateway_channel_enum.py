# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/gateway_channel_enum.py

Canal de cobro explícito: selecciona el adaptador de pasarela.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class GatewayChannel(StrEnum):
    MANUAL = "manual"
    STRIPE_CARD = "stripe_card"
    CONEKTA_CARD = "conekta_card"
    CONEKTA_OXXO = "conekta_oxxo"
    CONEKTA_SPEI = "conekta_spei"

    __pg_enum_name__ = "gateway_channel_enum"

    @classmethod
    def as_db_enum(cls, name: str = "gateway_channel_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["GatewayChannel"]

# Fin del archivo app/modules/payments/enums/gateway_channel_enum.py
