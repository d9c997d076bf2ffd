# -*- coding: utf-8 -*-
"""
app/modules/enrollments/schemas/__init__.py
"""

from .enrollment_schemas import (
    EnrollmentCreate,
    EnrollmentCancel,
    EnrollmentComplete,
    DiscountApply,
    EnrollmentOut,
    LedgerPaymentOut,
    EnrollmentLedgerOut,
)

__all__ = [
    "EnrollmentCreate",
    "EnrollmentCancel",
    "EnrollmentComplete",
    "DiscountApply",
    "EnrollmentOut",
    "LedgerPaymentOut",
    "EnrollmentLedgerOut",
]
