# -*- coding: utf-8 -*-
"""
app/modules/payments/jobs/__init__.py
"""

from .expire_pending_payments_job import (
    EXPIRE_PAYMENTS_JOB_ID,
    expire_pending_payments,
    register_expire_payments_job,
)
from .recompute_ledgers_job import recompute_all_ledgers

__all__ = [
    "EXPIRE_PAYMENTS_JOB_ID",
    "expire_pending_payments",
    "register_expire_payments_job",
    "recompute_all_ledgers",
]
