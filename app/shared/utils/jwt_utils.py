# -*- coding: utf-8 -*-
"""
app/shared/utils/jwt_utils.py

Validación de JWT (python-jose). La emisión de tokens vive en el
servicio de identidad externo; aquí solo se decodifican y validan.

Autor: Equipo Backend Escolar
Fecha: 2026-03-03
"""

import logging
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.shared.config import get_settings

logger = logging.getLogger(__name__)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decodifica y valida un JWT (firma y expiración). Devuelve None si es inválido o expiró.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key.get_secret_value(),
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        logger.warning(f"Token expirado: {e}")
        return None
    except JWTError as e:
        logger.warning(f"Token inválido: {e}")
        return None


__all__ = ["decode_token"]
# Fin del archivo app/shared/utils/jwt_utils.py
