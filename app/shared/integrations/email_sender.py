# -*- coding: utf-8 -*-
"""
app/shared/integrations/email_sender.py

Factory de EmailSender según EMAIL_MODE:
- console: solo loguea (desarrollo / tests)
- smtp: SMTPEmailSender

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

import logging
from typing import Optional, Protocol

from app.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)


class IEmailSender(Protocol):
    """Protocolo para implementaciones de email sender."""
    async def send_email(self, to_email: str, subject: str, text: str) -> None: ...


class ConsoleEmailSender:
    """Implementación que no envía nada; solo hace logging."""

    async def send_email(self, to_email: str, subject: str, text: str) -> None:
        logger.info(f"[CONSOLE EMAIL] {subject} → {to_email}")


def build_email_sender(settings: Optional[BaseAppSettings] = None) -> IEmailSender:
    """
    Crea el sender apropiado según la configuración.

    Raises:
        ValueError: si EMAIL_MODE=smtp y faltan credenciales
    """
    if settings is None:
        from app.shared.config import get_settings
        settings = get_settings()

    if settings.email_mode == "smtp":
        from app.shared.integrations.smtp_email_sender import SMTPEmailSender
        return SMTPEmailSender.from_settings(settings)

    return ConsoleEmailSender()


__all__ = ["IEmailSender", "ConsoleEmailSender", "build_email_sender"]

# Fin del archivo app/shared/integrations/email_sender.py
