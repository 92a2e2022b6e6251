"""
Ядро шаблонизатора Scaffold: модель элементов, лексер, загрузчики, кэш,
парсер и рендерер.

Парсер и рендерер импортируются из своих модулей напрямую
(scaffold.template.parser / scaffold.template.renderer): они зависят
от scaffold.data, который сам опирается на модель элементов.
"""

from __future__ import annotations

from .cache import TemplateCache
from .elements import Element, FieldIndex, ParsedTemplate, PartialRecord, clone_elements
from .loader import DictLoader, FileSystemLoader, TemplateLoader

__all__ = [
    "Element",
    "FieldIndex",
    "ParsedTemplate",
    "PartialRecord",
    "clone_elements",
    "TemplateCache",
    "TemplateLoader",
    "FileSystemLoader",
    "DictLoader",
]
