# -*- coding: utf-8 -*-
"""
app/modules/enrollments/services/__init__.py
"""

from .eligibility import AllowAllEligibility, EnrollmentEligibility
from .enrollment_service import EnrollmentLedger, EnrollmentService, generate_certificate_number

__all__ = [
    "AllowAllEligibility",
    "EnrollmentEligibility",
    "EnrollmentLedger",
    "EnrollmentService",
    "generate_certificate_number",
]
