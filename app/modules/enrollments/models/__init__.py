# -*- coding: utf-8 -*-
"""
app/modules/enrollments/models/__init__.py

Modelos ORM del módulo Enrollments.
"""

from .enrollment_models import Enrollment

__all__ = ["Enrollment"]
