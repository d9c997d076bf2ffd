# -*- coding: utf-8 -*-
"""
app/shared/utils/__init__.py

Utilidades compartidas.
"""

from .datetime_helpers import utcnow, utctoday, ensure_utc, from_unix
from .jwt_utils import decode_token

__all__ = ["utcnow", "utctoday", "ensure_utc", "from_unix", "decode_token"]
