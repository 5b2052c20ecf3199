"""
Бизнес-логика: пользователи, маркеры, геопозиции.
"""
