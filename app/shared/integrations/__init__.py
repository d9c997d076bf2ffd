# -*- coding: utf-8 -*-
"""
app/shared/integrations/__init__.py

Integraciones externas compartidas (correo).
"""

from .email_sender import ConsoleEmailSender, IEmailSender, build_email_sender
from .smtp_email_sender import SMTPEmailSender

__all__ = [
    "IEmailSender",
    "ConsoleEmailSender",
    "SMTPEmailSender",
    "build_email_sender",
]
