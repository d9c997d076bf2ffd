# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/webhook_provider_enum.py

Proveedores que notifican vía webhook.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class WebhookProvider(StrEnum):
    STRIPE = "stripe"
    CONEKTA = "conekta"

    __pg_enum_name__ = "webhook_provider_enum"

    @classmethod
    def as_db_enum(cls, name: str = "webhook_provider_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["WebhookProvider"]

# Fin del archivo app/modules/payments/enums/webhook_provider_enum.py
