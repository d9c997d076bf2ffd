# -*- coding: utf-8 -*-
"""
app/modules/enrollments/schemas/enrollment_schemas.py

Esquemas Pydantic para inscripciones y su ledger.

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.modules.enrollments.enums import (
    EnrollmentPaymentStatus,
    EnrollmentStatus,
    PaymentPlan,
)


class EnrollmentCreate(BaseModel):
    """Alta de inscripción (solo administradores)."""

    student_id: uuid.UUID
    course_id: uuid.UUID
    teacher_id: uuid.UUID
    start_date: date
    end_date: date
    total_amount: Decimal = Field(description="Monto acordado del curso.")
    payment_plan: PaymentPlan = PaymentPlan.FULL
    next_payment_date: Optional[date] = None
    activate: bool = Field(
        default=True,
        description="Si es True la inscripción nace 'active'; si no, 'pending'.",
    )
    notes: Optional[str] = None


class EnrollmentCancel(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)


class EnrollmentComplete(BaseModel):
    final_grade: Optional[Decimal] = Field(default=None, ge=0, le=100)
    issue_certificate: bool = False


class DiscountApply(BaseModel):
    amount: Decimal = Field(description="Nuevo descuento total (reemplaza al anterior).")
    reason: str = Field(min_length=1, max_length=500)


class EnrollmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    student_id: uuid.UUID
    course_id: uuid.UUID
    teacher_id: uuid.UUID
    status: EnrollmentStatus
    start_date: date
    end_date: date
    completion_date: Optional[datetime] = None
    final_grade: Optional[Decimal] = None
    certificate_issued: bool = False
    certificate_number: Optional[str] = None
    total_amount: Decimal
    discount_amount: Decimal
    discount_reason: Optional[str] = None
    paid_amount: Decimal
    remaining_amount: Decimal
    payment_progress: Decimal
    payment_status: EnrollmentPaymentStatus
    payment_plan: PaymentPlan
    next_payment_date: Optional[date] = None
    last_payment_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime


class LedgerPaymentOut(BaseModel):
    """Renglón de pago dentro del estado de cuenta de la inscripción."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    transaction_id: str
    amount: Decimal
    refund_amount: Decimal
    currency: str
    payment_method: str
    status: str
    receipt_number: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime


class EnrollmentLedgerOut(BaseModel):
    enrollment: EnrollmentOut
    payments: List[LedgerPaymentOut]


__all__ = [
    "EnrollmentCreate",
    "EnrollmentCancel",
    "EnrollmentComplete",
    "DiscountApply",
    "EnrollmentOut",
    "LedgerPaymentOut",
    "EnrollmentLedgerOut",
]

# Fin del archivo app/modules/enrollments/schemas/enrollment_schemas.py
