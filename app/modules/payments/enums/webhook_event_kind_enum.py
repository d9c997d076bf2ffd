# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/webhook_event_kind_enum.py

Tipo de evento normalizado, independiente del proveedor.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class WebhookEventKind(StrEnum):
    CHARGE_SUCCEEDED = "charge_succeeded"
    CHARGE_FAILED = "charge_failed"
    ORDER_EXPIRED = "order_expired"
    IGNORED = "ignored"

    __pg_enum_name__ = "webhook_event_kind_enum"

    @classmethod
    def as_db_enum(cls, name: str = "webhook_event_kind_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)


__all__ = ["WebhookEventKind"]

# Fin del archivo app/modules/payments/enums/webhook_event_kind_enum.py
