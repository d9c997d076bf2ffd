# -*- coding: utf-8 -*-
"""
app/modules/payments/repositories/__init__.py
"""

from .payment_repository import PaymentRepository
from .payment_event_repository import PaymentEventRepository

__all__ = ["PaymentRepository", "PaymentEventRepository"]
