# -*- coding: utf-8 -*-
"""
app/modules/payments/metrics/__init__.py
"""

from .prometheus_exporter import *  # noqa: F401,F403
from .prometheus_exporter import __all__  # noqa: F401
