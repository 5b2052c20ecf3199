"""
API & Relay Service — HTTP API и push-канал Live Map.

Обеспечивает:
- Регистрацию, вход и список пользователей
- Создание и редактирование маркеров с фото/видео
- WebSocket-рассылку маркеров и геопозиций
- Раздачу загруженных файлов по /uploads
"""
