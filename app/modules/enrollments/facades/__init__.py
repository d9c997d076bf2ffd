# -*- coding: utf-8 -*-
"""
app/modules/enrollments/facades/__init__.py
"""

from .enrollment_flows import (
    apply_discount,
    change_status,
    complete_enrollment,
    create_enrollment,
)

__all__ = [
    "apply_discount",
    "change_status",
    "complete_enrollment",
    "create_enrollment",
]
