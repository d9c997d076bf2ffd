# -*- coding: utf-8 -*-
"""
app/main.py

Punto de entrada del backend escolar (inscripciones + ledger de pagos).

Ajustes clave:
- .env cargado antes de instanciar settings (python-dotenv)
- Logging centralizado (plain/json) desde settings
- Scheduler con el barrido de pagos vencidos (payments_expire_pending)
- Observabilidad Prometheus (/metrics) y health (/health)
- Errores de dominio → JSON {"detail": {"error_code", "message"}}

Autor: Equipo Backend Escolar
Fecha: 2026-03-09
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que lea settings.
# Fuera de producción el .env manda sobre el entorno.
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_ENVIRONMENT = os.getenv("PYTHON_ENV", "development").strip().strip('"').strip("'").lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_ENVIRONMENT not in ("production", "test"))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.shared.config import get_payments_settings, get_settings, setup_logging
from app.shared.middleware import (
    JSONExceptionMiddleware,
    RequestLoggingMiddleware,
    register_exception_handlers,
)
from app.shared.orm import load_all_models
from app.observability.prom import setup_observability

_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_format)
logger = logging.getLogger(__name__)


def _start_scheduler() -> bool:
    """Registra el barrido de expiración y arranca el scheduler. False si no aplica."""
    interval = get_payments_settings().expiry_sweep_interval_minutes
    if _settings.python_env == "test" or interval <= 0:
        logger.info("Scheduler deshabilitado (env=%s, intervalo=%s)", _settings.python_env, interval)
        return False

    from app.shared.scheduler import get_scheduler
    from app.modules.payments.jobs import register_expire_payments_job

    register_expire_payments_job(interval)
    get_scheduler().start()
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    load_all_models()
    scheduler_started = _start_scheduler()
    logger.info("Backend escolar iniciado (env=%s)", _settings.python_env)
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        if scheduler_started:
            from app.shared.scheduler import get_scheduler

            get_scheduler().shutdown(wait=True)
        logger.info("Backend escolar apagado")


openapi_tags = [
    {"name": "enrollments", "description": "Inscripciones y estado de cuenta"},
    {"name": "payments", "description": "Pagos, conciliación y barrido de vencidos"},
    {"name": "payments:refunds", "description": "Reembolsos administrativos"},
    {"name": "payments:webhooks", "description": "Webhooks de Stripe y Conekta"},
]

app = FastAPI(
    title=_settings.app_name,
    description="API de inscripciones y conciliación de pagos",
    version=_settings.app_version,
    lifespan=lifespan,
    openapi_tags=openapi_tags,
)

# El orden real de ejecución de middlewares en Starlette es inverso al registro:
# CORS se registra al final para ejecutarse primero (outermost).
app.add_middleware(RequestLoggingMiddleware)
if _settings.metrics_enabled:
    setup_observability(app)
app.add_middleware(JSONExceptionMiddleware)

_cors_origins = _settings.get_cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=_cors_origins != ["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=600,
)

register_exception_handlers(app)

from app.routes import router as main_router

app.include_router(main_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=_settings.app_host, port=_settings.app_port)

# Fin del archivo app/main.py
