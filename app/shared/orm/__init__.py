# -*- coding: utf-8 -*-
"""
app/shared/orm/__init__.py

Módulo de configuración ORM compartida.
"""

from .model_registry import load_all_models

__all__ = ["load_all_models"]
