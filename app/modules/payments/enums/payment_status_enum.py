# -*- coding: utf-8 -*-
"""
app/modules/payments/enums/payment_status_enum.py

Estados del pago.
- 'processing': fila escrita antes de llamar a la pasarela.
- 'pending': cargo creado que espera confirmación asíncrona (OXXO/SPEI).
- Terminales: completed, failed, cancelled, refunded.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from enum import StrEnum

from sqlalchemy import Enum as SAEnum

from app.shared.database.base import as_db_enum as _as_db_enum


class PaymentStatus(StrEnum):
    """Estado del pago en su ciclo de vida con la pasarela."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    __pg_enum_name__ = "payment_status_enum"

    @classmethod
    def as_db_enum(cls, name: str = "payment_status_enum") -> SAEnum:
        return _as_db_enum(cls, name=name)

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_PAYMENT_STATUSES

    @property
    def is_open(self) -> bool:
        return self in (PaymentStatus.PENDING, PaymentStatus.PROCESSING)


TERMINAL_PAYMENT_STATUSES = frozenset({
    PaymentStatus.COMPLETED,
    PaymentStatus.FAILED,
    PaymentStatus.CANCELLED,
    PaymentStatus.REFUNDED,
})

# Estados que aportan al monto pagado (los reembolsados, por su remanente)
SETTLED_PAYMENT_STATUSES = frozenset({
    PaymentStatus.COMPLETED,
    PaymentStatus.REFUNDED,
})


__all__ = ["PaymentStatus", "TERMINAL_PAYMENT_STATUSES", "SETTLED_PAYMENT_STATUSES"]

# Fin del archivo app/modules/payments/enums/payment_status_enum.py
