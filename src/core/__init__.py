# src/core/__init__.py
"""
Доменный слой Caloria AI.

- nutrition: BMR/TDEE и рекомендации
- sleep: длительность и сводка сна
- validation: проверка данных Mini App
- telegram: Bot API и initData
- notifications: уведомления по шаблонам
"""

__all__: list[str] = []
