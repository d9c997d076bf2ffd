# -*- coding: utf-8 -*-
"""
app/shared/database/repository.py

Repositorio base para operaciones async con SQLAlchemy.

Autor: Equipo Backend Escolar
Fecha: 2026-03-02
"""

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")  # modelo ORM


class BaseRepository(Generic[T]):
    """Repositorio asincrónico base para CRUD común."""

    def __init__(self, model: Type[T]):
        self.model = model

    # -------------------------------------------------------------
    # CRUD básico
    # -------------------------------------------------------------
    async def get(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        return await session.get(self.model, obj_id)

    async def get_for_update(self, session: AsyncSession, obj_id: Any) -> Optional[T]:
        """
        Obtiene la fila con SELECT ... FOR UPDATE (bloqueo hasta fin de transacción).
        populate_existing refresca la instancia si ya estaba en el identity map.
        """
        stmt = (
            select(self.model)
            .where(self.model.id == obj_id)  # type: ignore[attr-defined]
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list(self, session: AsyncSession) -> Sequence[T]:
        result = await session.execute(select(self.model))
        return result.scalars().all()

    async def create(self, session: AsyncSession, **kwargs) -> T:
        obj = self.model(**kwargs)
        session.add(obj)
        await session.flush()
        return obj

# Fin del archivo app/shared/database/repository.py
