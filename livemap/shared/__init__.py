"""
Общие модели, которыми обмениваются слои сервиса.
"""
