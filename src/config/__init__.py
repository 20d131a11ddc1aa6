# src/config/__init__.py
"""
Конфигурация Caloria AI: config/config.json + переменные окружения.
"""

from src.config.loader import Settings, get_project_root, get_settings, settings

__all__ = ["Settings", "get_project_root", "get_settings", "settings"]
