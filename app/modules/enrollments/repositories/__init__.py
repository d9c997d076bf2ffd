# -*- coding: utf-8 -*-
"""
app/modules/enrollments/repositories/__init__.py
"""

from .enrollment_repository import EnrollmentRepository

__all__ = ["EnrollmentRepository"]
