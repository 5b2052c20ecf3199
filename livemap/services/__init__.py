"""
Сервисы (FastAPI приложения).
"""
