"""
Кэш разобранных шаблонов.

Ключ — пара (path, section). Первая запись побеждает: однажды сохранённый
снимок движок больше не заменяет и не инвалидирует; вытеснение и
обновление — забота внешнего кода (clear/discard).

Конкурентность: все операции выполняются под одним реентерабельным
замком. Парсер держит его на всё время разбора отсутствующего ключа
(включая рекурсивный разбор включений), поэтому на каждый ключ
приходится не больше одного разбора.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, List, Optional, Tuple

from .elements import ParsedTemplate

# Разделитель, недопустимый в пути
KEY_SEPARATOR = "\x00"


def make_key(path: str, section: str = "") -> str:
    return f"{path}{KEY_SEPARATOR}{section or ''}"


def split_key(key: str) -> Tuple[str, str]:
    path, _, section = key.partition(KEY_SEPARATOR)
    return path, section


class TemplateCache:
    """Отображение (path, section) → ParsedTemplate."""

    def __init__(self) -> None:
        self._entries: Dict[str, ParsedTemplate] = {}
        self.lock = threading.RLock()

    def get(self, path: str, section: str = "") -> Optional[ParsedTemplate]:
        with self.lock:
            return self._entries.get(make_key(path, section))

    def put(self, path: str, section: str, parsed: ParsedTemplate) -> ParsedTemplate:
        """
        Сохраняет снимок, если ключ ещё свободен.

        Returns:
            Снимок, который лежит в кэше после вызова (существующий,
            если ключ уже был занят)
        """
        with self.lock:
            return self._entries.setdefault(make_key(path, section), parsed)

    def discard(self, path: str, section: str = "") -> None:
        with self.lock:
            self._entries.pop(make_key(path, section), None)

    def clear(self) -> None:
        with self.lock:
            self._entries.clear()

    def keys(self) -> List[Tuple[str, str]]:
        with self.lock:
            return [split_key(k) for k in self._entries]

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        path, section = item
        with self.lock:
            return make_key(path, section) in self._entries

    def __len__(self) -> int:
        with self.lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.keys())


__all__ = ["TemplateCache", "KEY_SEPARATOR", "make_key", "split_key"]
