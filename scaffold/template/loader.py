"""
Загрузчики исходного текста шаблонов.

Движку нужен только один метод: load(path) → текст или None, если
шаблона нет. Отсутствие файла — не ошибка: парсер вернёт пустой шаблон.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Срезает ведущий разделитель пути: "/ui/button" → "ui/button"."""
    path = path.replace("\\", "/")
    if path.startswith("/"):
        path = path[1:]
    return path


@runtime_checkable
class TemplateLoader(Protocol):
    """Протокол загрузчика шаблонов."""

    def load(self, path: str) -> Optional[str]:
        """
        Возвращает исходный текст шаблона по логическому пути.

        Args:
            path: Логический путь, например "/ui/button.html"

        Returns:
            Текст шаблона или None, если шаблон не найден
        """
        ...


class FileSystemLoader:
    """
    Загружает шаблоны с диска относительно корня.

    Корень по умолчанию — текущая рабочая директория процесса
    на момент вызова load().
    """

    def __init__(self, root: Optional[Path] = None, *, encoding: str = "utf-8"):
        self.root = Path(root) if root is not None else None
        self.encoding = encoding

    def resolve(self, path: str) -> Path:
        base = self.root if self.root is not None else Path.cwd()
        return base / normalize_path(path)

    def load(self, path: str) -> Optional[str]:
        file_path = self.resolve(path)
        if not file_path.is_file():
            logger.debug(f"Template file not found: {file_path}")
            return None
        return file_path.read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"FileSystemLoader(root={self.root!r}, encoding={self.encoding!r})"


class DictLoader:
    """Загрузчик из словаря путь → текст (для встраивания и тестов)."""

    def __init__(self, templates: Mapping[str, str]):
        self.templates = {normalize_path(k): v for k, v in templates.items()}

    def load(self, path: str) -> Optional[str]:
        return self.templates.get(normalize_path(path))


__all__ = ["TemplateLoader", "FileSystemLoader", "DictLoader", "normalize_path"]
