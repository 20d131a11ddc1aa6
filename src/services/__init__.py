# src/services/__init__.py
"""
Прикладные сервисы.

- api: FastAPI приложение (/api/*), репозитории и сервисы профиля и дневника
- unified_data: доступ к данным через REST API с откатом на БД
"""

__all__: list[str] = []
