# -*- coding: utf-8 -*-
"""
app/modules/payments/facades/refunds/__init__.py
"""

from .refund_flow import process_refund

__all__ = ["process_refund"]
