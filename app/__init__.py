# -*- coding: utf-8 -*-
"""
app/__init__.py

Paquete principal del backend escolar: inscripciones, pagos y
conciliación del saldo de cada inscripción.
"""
