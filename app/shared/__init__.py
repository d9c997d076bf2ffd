# -*- coding: utf-8 -*-
"""
app/shared/__init__.py

Infraestructura compartida: configuración, base de datos, errores de
dominio, contexto de autenticación, middlewares y observabilidad.

No inicializa settings en import-time para evitar efectos colaterales
durante la recolección de tests.
"""
