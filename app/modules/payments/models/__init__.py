# -*- coding: utf-8 -*-
"""
app/modules/payments/models/__init__.py

Modelos ORM del módulo Payments.
"""

from app.modules.enrollments.models import Enrollment  # noqa: F401  (FK enrollments.id)

from .payment_models import Payment
from .payment_event_models import PaymentEvent

__all__ = ["Payment", "PaymentEvent"]
