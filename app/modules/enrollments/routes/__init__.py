# -*- coding: utf-8 -*-
"""
app/modules/enrollments/routes/__init__.py
"""

from .enrollments import router

__all__ = ["router"]
