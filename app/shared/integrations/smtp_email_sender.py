# -*- coding: utf-8 -*-
"""
app/shared/integrations/smtp_email_sender.py

Envío de correos de texto por SMTP (SSL directo o STARTTLS).

smtplib es bloqueante: el envío corre en un hilo con asyncio.to_thread.
Con EMAIL_TLS_VERIFY=true se usa el CA bundle de certifi para no depender
de los certificados del sistema operativo.

Autor: Equipo Backend Escolar
Fecha: 2026-03-08
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, formatdate, make_msgid
from typing import Optional

import certifi

from app.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)


def _build_tls_context(verify: bool) -> ssl.SSLContext:
    if verify:
        ctx = ssl.create_default_context(cafile=certifi.where())
        ctx.check_hostname = True
        ctx.verify_mode = ssl.CERT_REQUIRED
        return ctx

    # Cifrado sin verificación de identidad del servidor (staging)
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


class SMTPEmailSender:
    """Envío de correos por SMTP."""

    def __init__(
        self,
        server: str,
        port: int,
        username: str,
        password: str,
        from_email: str,
        from_name: str = "Control Escolar",
        use_ssl: bool = False,
        use_tls: bool = True,
        timeout: int = 30,
        tls_verify: bool = True,
    ):
        self.server = server
        self.port = port
        self.username = username
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.use_ssl = use_ssl
        self.use_tls = use_tls
        self.timeout = timeout
        self.tls_verify = tls_verify

    @classmethod
    def from_settings(cls, settings: BaseAppSettings) -> "SMTPEmailSender":
        password = settings.email_password.get_secret_value() if settings.email_password else ""
        if not all([settings.email_server, settings.email_username, password, settings.email_from]):
            raise ValueError(
                "EMAIL_SERVER, EMAIL_USERNAME, EMAIL_PASSWORD y EMAIL_FROM son requeridos"
            )

        logger.info(
            "[SMTP] config: server=%s port=%s ssl=%s tls=%s tls_verify=%s timeout=%ss",
            settings.email_server,
            settings.email_port,
            settings.email_use_ssl,
            settings.email_use_tls,
            settings.email_tls_verify,
            settings.email_timeout_sec,
        )
        return cls(
            server=settings.email_server,  # type: ignore[arg-type]
            port=settings.email_port,
            username=settings.email_username,  # type: ignore[arg-type]
            password=password,
            from_email=settings.email_from,  # type: ignore[arg-type]
            from_name=settings.email_from_name,
            use_ssl=settings.email_use_ssl,
            use_tls=settings.email_use_tls,
            timeout=settings.email_timeout_sec,
            tls_verify=settings.email_tls_verify,
        )

    def build_message(self, to_email: str, subject: str, text: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = to_email
        msg["Date"] = formatdate(localtime=False)
        msg["Message-ID"] = make_msgid(domain=self.from_email.split("@")[-1])
        msg.set_content(text)
        return msg

    def _send_sync(self, to_email: str, subject: str, text: str) -> Optional[str]:
        msg = self.build_message(to_email, subject, text)
        context = _build_tls_context(self.tls_verify)

        try:
            if self.use_ssl:
                with smtplib.SMTP_SSL(self.server, self.port, timeout=self.timeout, context=context) as server:
                    server.login(self.username, self.password)
                    refused = server.send_message(msg)
            else:
                with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as server:
                    server.ehlo()
                    if self.use_tls:
                        server.starttls(context=context)
                        server.ehlo()
                    server.login(self.username, self.password)
                    refused = server.send_message(msg)
        except Exception:
            logger.exception("[SMTP] send failed to=%s", to_email)
            raise

        if refused:
            logger.warning("[SMTP] refused: %s", refused)
        msg_id = msg.get("Message-ID")
        logger.info("[SMTP] sent ok to=%s msg_id=%s", to_email, msg_id)
        return msg_id

    async def send_email(self, to_email: str, subject: str, text: str) -> None:
        await asyncio.to_thread(self._send_sync, to_email, subject, text)


__all__ = ["SMTPEmailSender"]

# Fin del archivo app/shared/integrations/smtp_email_sender.py
