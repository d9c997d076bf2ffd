# -*- coding: utf-8 -*-
"""
app/modules/payments/models/payment_event_models.py

Bitácora de eventos de webhook verificados (Stripe/Conekta).
Un reenvío del mismo evento por el proveedor se detecta por
(provider, provider_event_id) y no vuelve a tocar el ledger.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, json_column_type
from app.shared.utils.datetime_helpers import utcnow
from app.modules.payments.enums import WebhookEventKind, WebhookProvider

if TYPE_CHECKING:
    from .payment_models import Payment


class PaymentEvent(Base):
    __tablename__ = "payment_events"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    payment_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("payments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    provider: Mapped[WebhookProvider] = mapped_column(WebhookProvider.as_db_enum(), nullable=False)

    provider_event_id: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        doc="ID del evento en el proveedor (evt_... / id de webhook Conekta).",
    )

    event_type: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        doc="Tipo crudo del proveedor (payment_intent.succeeded, order.paid, ...).",
    )

    event_kind: Mapped[WebhookEventKind] = mapped_column(WebhookEventKind.as_db_enum(), nullable=False)

    outcome: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        doc="Resultado del procesamiento: processed, created, duplicate, ignored.",
    )

    payload: Mapped[Optional[dict]] = mapped_column(json_column_type, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    payment: Mapped[Optional["Payment"]] = relationship(
        "Payment",
        back_populates="events",
        lazy="noload",
    )

    __table_args__ = (
        UniqueConstraint(
            "provider",
            "provider_event_id",
            name="uq_payment_events_provider_event_id",
        ),
    )


__all__ = ["PaymentEvent"]

# Fin del archivo app/modules/payments/models/payment_event_models.py
