# -*- coding: utf-8 -*-
"""
app/shared/database/database.py

Engine async de SQLAlchemy y fábrica de sesiones.

Provee:
- engine (create_async_engine) a partir de settings.database_url
- SessionLocal (async_sessionmaker)
- Dependencia FastAPI: get_async_session
- context manager: session_scope() para jobs y scripts
- check_database_health()

Notas:
- Las sesiones NO hacen commit automático: lo decide la fachada que
  orquesta la operación (una transacción por request).
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.shared.config import get_settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)


def build_engine(url: str | None = None, *, echo: bool | None = None) -> AsyncEngine:
    """Crea el engine async; en PostgreSQL usa pool con pre-ping."""
    settings = get_settings()
    url = url or settings.database_url
    echo = settings.db_echo_sql if echo is None else echo

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=echo)

    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
    )


engine = build_engine()

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Dependencia FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            # Importante: rollback para liberar locks de la transacción
            await session.rollback()
            raise
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Context manager reutilizable en jobs/scripts
@asynccontextmanager
async def session_scope() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        try:
            yield session
            # El commit lo decide quien usa el scope
        finally:
            if session.in_transaction():
                await session.rollback()


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning(f"[DB] Health check falló: {e!r}")
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "get_async_session",
    "session_scope",
    "check_database_health",
]
# Fin del archivo app/shared/database/database.py
