"""
Scaffold — шаблонизатор HTML-подобных файлов с mustache-тегами.

Теги {{name}} ... {{/name}} показывают или скрывают блоки, {{name}}
подставляет значение, {{name "path"}} включает другой шаблон с
переименованием его тегов в "name-...".
"""

from __future__ import annotations

from .config import ScaffoldConfig
from .data import DataStore, NamespacedView
from .engine import Scaffold, ScaffoldEngine
from .errors import ConfigError, ScaffoldUserError, TemplateCloneError
from .template import DictLoader, FileSystemLoader, ParsedTemplate, TemplateCache
from .template.parser import TemplateParser

__all__ = [
    "Scaffold",
    "ScaffoldEngine",
    "ScaffoldConfig",
    "DataStore",
    "NamespacedView",
    "TemplateCache",
    "TemplateParser",
    "ParsedTemplate",
    "FileSystemLoader",
    "DictLoader",
    "ScaffoldUserError",
    "ConfigError",
    "TemplateCloneError",
]
