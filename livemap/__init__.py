"""
Live Map — бэкенд обмена геопозицией в реальном времени.
"""

__version__ = "1.0.0"
