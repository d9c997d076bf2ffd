# -*- coding: utf-8 -*-
"""
app/modules/enrollments/repositories/enrollment_repository.py

Repositorio para la tabla enrollments.

Responsabilidades:
- Bloqueo de fila (SELECT ... FOR UPDATE) para recomputar el saldo
- Detección de inscripciones abiertas duplicadas (estudiante, curso)
- Listados para mantenimiento del ledger

Autor: Equipo Backend Escolar
Fecha: 2026-03-04
"""

import uuid
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.enrollments.enums import EnrollmentStatus
from app.modules.enrollments.models.enrollment_models import Enrollment


class EnrollmentRepository(BaseRepository[Enrollment]):
    def __init__(self) -> None:
        super().__init__(Enrollment)

    async def find_open_by_student_course(
        self,
        session: AsyncSession,
        *,
        student_id: uuid.UUID,
        course_id: uuid.UUID,
    ) -> Optional[Enrollment]:
        """Inscripción no cancelada del estudiante en el curso, si existe."""
        stmt = select(Enrollment).where(
            Enrollment.student_id == student_id,
            Enrollment.course_id == course_id,
            Enrollment.status != EnrollmentStatus.CANCELLED,
        )
        result = await session.execute(stmt)
        return result.scalars().first()

    async def list_ids(self, session: AsyncSession) -> Sequence[uuid.UUID]:
        result = await session.execute(select(Enrollment.id).order_by(Enrollment.created_at))
        return result.scalars().all()


__all__ = ["EnrollmentRepository"]

# Fin del archivo app/modules/enrollments/repositories/enrollment_repository.py
