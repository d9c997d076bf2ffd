# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/payments/__init__.py

Fachadas de pagos (dueñas de la transacción).
"""

from .initiate import initiate_payment
from .sweep import run_expiry_sweep

__all__ = ["initiate_payment", "run_expiry_sweep"]
