# -*- coding: utf-8 -*-
"""
app/shared/scheduler/scheduler_service.py

Programación de tareas periódicas con APScheduler (barrido de pagos
vencidos, mantenimiento).

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

import logging
from typing import Callable, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger(__name__)


class SchedulerService:
    """Envoltura mínima sobre AsyncIOScheduler (una instancia por job)."""

    def __init__(self):
        self._scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 30,
            },
            timezone="UTC",
        )
        self._started = False

    def start(self):
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("SchedulerService iniciado")

    def shutdown(self, wait: bool = True):
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("SchedulerService detenido")

    def add_interval_job(
        self,
        func: Callable,
        job_id: str,
        minutes: int = 0,
        seconds: int = 0,
        **kwargs,
    ) -> str:
        """Agrega (o reemplaza) un job que corre cada `minutes`/`seconds`."""
        # replace_existing no deduplica la lista de pendientes antes de start()
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            pass
        self._scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(minutes=minutes, seconds=seconds),
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.info(f"Job '{job_id}' agregado: cada {minutes}m {seconds}s")
        return job_id

    def get_jobs(self) -> list:
        return [
            {"id": job.id, "name": job.name, "trigger": str(job.trigger)}
            for job in self._scheduler.get_jobs()
        ]

    @property
    def is_running(self) -> bool:
        return self._started and self._scheduler.running


_scheduler_instance: Optional[SchedulerService] = None


def get_scheduler() -> SchedulerService:
    """Instancia global del scheduler (singleton)."""
    global _scheduler_instance
    if _scheduler_instance is None:
        _scheduler_instance = SchedulerService()
    return _scheduler_instance


__all__ = ["SchedulerService", "get_scheduler"]

# Fin del archivo app/shared/scheduler/scheduler_service.py
