# -*- coding: utf-8 -*-
"""
app/modules/payments/models/payment_models.py

Modelo ORM para la tabla payments.

Cada intento de cobro deja una fila con `transaction_id` interno (único),
escrita en estado 'processing' ANTES de llamar a la pasarela.
`external_payment_id` (id de la pasarela) es la llave de idempotencia de
los webhooks: a lo sumo una fila por id externo.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base, json_column_type
from app.shared.utils.datetime_helpers import utcnow
from app.modules.payments.enums import (
    Currency,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    SETTLED_PAYMENT_STATUSES,
)

if TYPE_CHECKING:
    from app.modules.enrollments.models.enrollment_models import Enrollment
    from .payment_event_models import PaymentEvent


MONEY = Numeric(10, 2, asdecimal=True)


class Payment(Base):
    """Pago aplicado (o intentado) contra una inscripción."""

    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    enrollment_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    currency: Mapped[Currency] = mapped_column(
        Currency.as_db_enum(),
        nullable=False,
        default=Currency.MXN,
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(PaymentMethod.as_db_enum(), nullable=False)
    payment_type: Mapped[PaymentType] = mapped_column(
        PaymentType.as_db_enum(),
        nullable=False,
        default=PaymentType.PARTIAL,
    )
    status: Mapped[PaymentStatus] = mapped_column(
        PaymentStatus.as_db_enum(),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )

    # ------------------------------------------------------------------
    # Identificadores
    # ------------------------------------------------------------------
    transaction_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        doc="Referencia interna generada antes de contactar la pasarela.",
    )
    external_payment_id: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        unique=True,
        doc="ID del PaymentIntent (Stripe) u orden (Conekta).",
    )
    receipt_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(
        String(128),
        nullable=True,
        doc="Referencia OXXO o CLABE SPEI para presentar al pagador.",
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    installment_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    total_installments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    processed_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    failure_reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ------------------------------------------------------------------
    # Reembolso (la fila original se conserva marcada 'refunded')
    # ------------------------------------------------------------------
    refund_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0.00"))
    refund_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    refunded_by: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    payment_metadata: Mapped[dict] = mapped_column(
        json_column_type,
        nullable=False,
        default=dict,
        doc="Canal, ids de reembolso de la pasarela, errores, datos del evento.",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    enrollment: Mapped["Enrollment"] = relationship(
        "Enrollment",
        back_populates="payments",
        lazy="noload",
    )

    events: Mapped[List["PaymentEvent"]] = relationship(
        "PaymentEvent",
        back_populates="payment",
        lazy="noload",
    )

    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        CheckConstraint("refund_amount >= 0", name="refund_amount_non_negative"),
        CheckConstraint("refund_amount <= amount", name="refund_within_amount"),
        Index("ix_payments_status_expires_at", "status", "expires_at"),
    )

    @property
    def contribution(self) -> Decimal:
        """Lo que este pago aporta al monto pagado de la inscripción."""
        if self.status not in SETTLED_PAYMENT_STATUSES:
            return Decimal("0.00")
        return (self.amount or Decimal("0")) - (self.refund_amount or Decimal("0"))

    def __repr__(self) -> str:
        return (
            f"<Payment id={self.id} txn={self.transaction_id} "
            f"external={self.external_payment_id} status={self.status} "
            f"amount={self.amount} {self.currency}>"
        )


__all__ = ["Payment"]

# Fin del archivo app/modules/payments/models/payment_models.py
