# -*- coding: utf-8 -*-
"""
app/modules/enrollments/enums/__init__.py

Superficie de exportación de enums del módulo Enrollments.
"""

from .enrollment_status_enum import EnrollmentStatus
from .enrollment_payment_status_enum import EnrollmentPaymentStatus
from .payment_plan_enum import PaymentPlan

__all__ = [
    "EnrollmentStatus",
    "EnrollmentPaymentStatus",
    "PaymentPlan",
]

# Fin del archivo app/modules/enrollments/enums/__init__.py
