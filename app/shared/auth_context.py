# -*- coding: utf-8 -*-
"""
app/shared/auth_context.py

Contexto de autenticación: única fuente de verdad para obtener el
principal (user_id + rol) de la petición.

El token lo emite el servicio de identidad; aquí solo se valida
(Bearer JWT, claims `sub` y `role`). FAIL-CLOSED: sin token válido → 401.

Autor: Equipo Backend Escolar
Fecha: 2026-03-03
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from app.shared.errors import PermissionDeniedError
from app.shared.utils.jwt_utils import decode_token

logger = logging.getLogger(__name__)


class PrincipalRole(StrEnum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(frozen=True)
class Principal:
    """Usuario autenticado que ejecuta la operación."""

    user_id: uuid.UUID
    role: PrincipalRole

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN


def principal_from_claims(claims: dict) -> Principal:
    """
    Construye el Principal a partir de los claims del token.

    Raises:
        ValueError: si faltan `sub`/`role` o tienen formato inválido
    """
    sub = claims.get("sub")
    role = claims.get("role")
    if not sub or not role:
        raise ValueError("Token sin sub/role")
    return Principal(user_id=uuid.UUID(str(sub)), role=PrincipalRole(str(role).lower()))


async def get_current_principal(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """Dependencia FastAPI: extrae y valida el Bearer token."""
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization.split(" ", 1)[1].strip()
    claims = decode_token(token)
    if not claims:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return principal_from_claims(claims)
    except ValueError as e:
        logger.warning("Auth context inválido: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid auth context",
        )


async def require_admin(principal: Principal = Depends(get_current_principal)) -> Principal:
    """Dependencia FastAPI: solo administradores."""
    ensure_admin(principal)
    return principal


def ensure_admin(principal: Principal) -> None:
    if not principal.is_admin:
        raise PermissionDeniedError("Operación reservada a administradores")


__all__ = [
    "Principal",
    "PrincipalRole",
    "principal_from_claims",
    "get_current_principal",
    "require_admin",
    "ensure_admin",
]

# Fin del archivo app/shared/auth_context.py
