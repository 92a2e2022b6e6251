"""
Общая тестовая инфраструктура Scaffold.

Modules:
- file_utils: создание файлов шаблонов на диске
- loaders: загрузчики-заглушки (подсчёт обращений)
"""

from .file_utils import write, write_templates
from .loaders import CountingLoader

__all__ = ["write", "write_templates", "CountingLoader"]
