# -*- coding: utf-8 -*-
"""
app/modules/payments/utils/identifiers.py

Generadores de identificadores de pago.

- transaction_id: TXN-<epoch ms>-<9 alfanuméricos>  (antes de cada intento)
- receipt_number: RCP-<YYYYMMDD>-<8 hex>            (al completarse)

Autor: Equipo Backend Escolar
Fecha: 2026-03-05
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import datetime
from typing import Optional

from app.shared.utils.datetime_helpers import utcnow

_ALPHABET = string.ascii_uppercase + string.digits


def generate_transaction_id() -> str:
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(9))
    return f"TXN-{int(time.time() * 1000)}-{suffix}"


def generate_receipt_number(now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    return f"RCP-{now:%Y%m%d}-{secrets.token_hex(4).upper()}"


__all__ = ["generate_transaction_id", "generate_receipt_number"]
