# -*- coding: utf-8 -*-
"""
app/modules/enrollments/models/enrollment_models.py

Modelo ORM para la tabla enrollments.

Una inscripción vincula estudiante, curso y docente, y lleva el ledger
de su saldo: total acordado, descuento, monto pagado (derivado) y
estado del saldo. `paid_amount` y `payment_status` se recalculan desde
el historial de pagos; nunca se incrementan.

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Numeric,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.shared.database.base import Base
from app.shared.utils.datetime_helpers import utcnow
from app.modules.enrollments.enums import (
    EnrollmentPaymentStatus,
    EnrollmentStatus,
    PaymentPlan,
)

if TYPE_CHECKING:
    from app.modules.payments.models.payment_models import Payment


MONEY = Numeric(10, 2, asdecimal=True)

# Una sola inscripción no cancelada por (estudiante, curso)
_OPEN_ENROLLMENT_PREDICATE = text("status <> 'cancelled'")


class Enrollment(Base):
    """Inscripción de un estudiante a un curso."""

    __tablename__ = "enrollments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Referencias a usuarios/cursos del sistema de identidad y catálogo (externos)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    course_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False, index=True)
    teacher_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    status: Mapped[EnrollmentStatus] = mapped_column(
        EnrollmentStatus.as_db_enum(),
        nullable=False,
        default=EnrollmentStatus.PENDING,
        index=True,
    )

    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    completion_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    final_grade: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    certificate_issued: Mapped[bool] = mapped_column(default=False, nullable=False)
    certificate_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, unique=True)

    # ------------------------------------------------------------------
    # Ledger
    # ------------------------------------------------------------------
    total_amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
        doc="Monto acordado; solo cambia vía descuento explícito.",
    )
    discount_amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
        default=Decimal("0.00"),
    )
    discount_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    paid_amount: Mapped[Decimal] = mapped_column(
        MONEY,
        nullable=False,
        default=Decimal("0.00"),
        doc="Derivado: suma de pagos completados (neto de reembolsos).",
    )
    payment_status: Mapped[EnrollmentPaymentStatus] = mapped_column(
        EnrollmentPaymentStatus.as_db_enum(),
        nullable=False,
        default=EnrollmentPaymentStatus.PENDING,
    )
    payment_plan: Mapped[PaymentPlan] = mapped_column(
        PaymentPlan.as_db_enum(),
        nullable=False,
        default=PaymentPlan.FULL,
    )
    next_payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    last_payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

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

    payments: Mapped[List["Payment"]] = relationship(
        "Payment",
        back_populates="enrollment",
        lazy="noload",
        order_by="Payment.created_at",
    )

    __table_args__ = (
        Index(
            "uq_enrollments_student_course_open",
            "student_id",
            "course_id",
            unique=True,
            postgresql_where=_OPEN_ENROLLMENT_PREDICATE,
            sqlite_where=_OPEN_ENROLLMENT_PREDICATE,
        ),
        CheckConstraint("total_amount >= 0", name="total_amount_non_negative"),
        CheckConstraint("discount_amount >= 0", name="discount_amount_non_negative"),
        CheckConstraint("start_date < end_date", name="date_range"),
    )

    @property
    def net_amount(self) -> Decimal:
        """Monto a cubrir una vez aplicado el descuento."""
        return (self.total_amount or Decimal("0")) - (self.discount_amount or Decimal("0"))

    @property
    def remaining_amount(self) -> Decimal:
        remaining = self.net_amount - (self.paid_amount or Decimal("0"))
        return remaining if remaining > 0 else Decimal("0.00")

    @property
    def payment_progress(self) -> Decimal:
        """Porcentaje pagado (0-100) sobre el monto neto."""
        net = self.net_amount
        if net <= 0:
            return Decimal("100.00")
        progress = (self.paid_amount or Decimal("0")) / net * 100
        return min(progress, Decimal("100")).quantize(Decimal("0.01"))

    def __repr__(self) -> str:
        return (
            f"<Enrollment id={self.id} student={self.student_id} course={self.course_id} "
            f"status={self.status} payment_status={self.payment_status} "
            f"paid={self.paid_amount}/{self.total_amount}>"
        )


__all__ = ["Enrollment"]

# Fin del archivo app/modules/enrollments/models/enrollment_models.py
