# -*- coding: utf-8 -*-
"""
app/modules/enrollments/services/eligibility.py

Colaborador de elegibilidad para nuevas inscripciones.

Los datos de usuarios y cursos viven en otros sistemas (identidad y
catálogo). Este módulo define el contrato; la implementación por defecto
acepta todo y las pruebas inyectan la suya.

Autor: Equipo Backend Escolar
Fecha: 2026-03-07
"""

from __future__ import annotations

import logging
import uuid
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class EnrollmentEligibility(Protocol):
    """
    Valida estudiante, docente y curso antes de inscribir.

    Debe lanzar NotFoundError si alguno no existe (o no tiene el rol
    esperado) y ValidationError si el curso está inactivo o lleno.
    """

    async def check(
        self,
        session: AsyncSession,
        *,
        student_id: uuid.UUID,
        course_id: uuid.UUID,
        teacher_id: uuid.UUID,
    ) -> None: ...


class AllowAllEligibility:
    """Sin catálogo conectado: toda inscripción es elegible."""

    async def check(
        self,
        session: AsyncSession,
        *,
        student_id: uuid.UUID,
        course_id: uuid.UUID,
        teacher_id: uuid.UUID,
    ) -> None:
        logger.debug(
            "Elegibilidad no verificada (sin catálogo): student=%s course=%s teacher=%s",
            student_id,
            course_id,
            teacher_id,
        )


__all__ = ["EnrollmentEligibility", "AllowAllEligibility"]

# Fin del archivo app/modules/enrollments/services/eligibility.py
