# src/shared/__init__.py
"""
Код, общий для API, бота и клиента данных.

Модули:
- models: DTO и Pydantic-модели запросов/ответов
"""

__all__: list[str] = []
