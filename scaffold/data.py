"""
Хранилище данных шаблона.

Все значения хранятся строками. Булева семантика — соглашение поверх
строк: "1" и "true" (без учёта регистра) означают истину, всё остальное —
ложь. Для чтения/записи флагов есть отдельные методы get_flag/set_flag.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

from .template.elements import FieldIndex

TRUE_VALUE = "1"
FALSE_VALUE = "0"


def is_truthy(value: Optional[str]) -> bool:
    """Флаговое прочтение строкового значения (без обрезки пробелов)."""
    if value is None:
        return False
    return value == TRUE_VALUE or value.lower() == "true"


def to_value(value: Any) -> str:
    """Приводит значение к строке хранилища (bool → "1"/"0", None → "")."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return TRUE_VALUE if value else FALSE_VALUE
    if isinstance(value, str):
        return value
    return str(value)


class DataStore(MutableMapping[str, str]):
    """
    Изменяемое строковое хранилище, одно на экземпляр шаблона.

    Засевается данными по умолчанию из кэша и затем перекрывается
    вызывающим кодом. Исходное отображение никогда не изменяется.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, str] = {}
        if initial:
            for key, value in initial.items():
                self._data[key] = to_value(value)

    # ---- Mapping ---- #

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = to_value(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"DataStore({self._data!r})"

    # ---- Named accessors ---- #

    def get_string(self, key: str, default: str = "") -> str:
        value = self._data.get(key)
        return default if value is None else value

    def set_string(self, key: str, value: str) -> None:
        self[key] = value

    def get_flag(self, key: str) -> bool:
        return is_truthy(self._data.get(key))

    def set_flag(self, key: str, flag: bool = True) -> None:
        self._data[key] = TRUE_VALUE if flag else FALSE_VALUE

    def copy(self) -> DataStore:
        return DataStore(self._data)


class NamespacedView(MutableMapping[str, str]):
    """
    Представление родительского хранилища с префиксом "<id>-".

    Собственного состояния не имеет: чтение и запись ключа key — это
    чтение и запись "<id>-key" у родителя. Используется для повторяющихся
    и дочерних привязок (например, полей раскрытого включения).
    """

    def __init__(self, parent: MutableMapping[str, str], id: str,
                 field_index: Optional[FieldIndex] = None):
        self.parent = parent
        self.id = id
        self.prefix = f"{id}-"
        self.fields = (field_index or FieldIndex()).subset(self.prefix)
        self._parent_index = field_index

    def _key(self, key: str) -> str:
        return self.prefix + key

    def __getitem__(self, key: str) -> str:
        return self.parent[self._key(key)]

    def __setitem__(self, key: str, value: Any) -> None:
        self.parent[self._key(key)] = to_value(value)

    def __delitem__(self, key: str) -> None:
        del self.parent[self._key(key)]

    def __iter__(self) -> Iterator[str]:
        for key in list(self.parent):
            if key.startswith(self.prefix):
                yield key[len(self.prefix):]

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"NamespacedView(id={self.id!r}, keys={list(self)!r})"

    def get_string(self, key: str, default: str = "") -> str:
        value = self.parent.get(self._key(key))
        return default if value is None else value

    def set_string(self, key: str, value: str) -> None:
        self[key] = value

    def get_flag(self, key: str) -> bool:
        return is_truthy(self.parent.get(self._key(key)))

    def set_flag(self, key: str, flag: bool = True) -> None:
        self.parent[self._key(key)] = TRUE_VALUE if flag else FALSE_VALUE

    def show(self, block: str) -> None:
        self.set_flag(block, True)

    def hide(self, block: str) -> None:
        self.set_flag(block, False)

    def bind(self, obj: Any, root: str = "") -> None:
        from .binder import bind
        bind(self, obj, root)

    def child(self, id: str) -> NamespacedView:
        """Вложенное представление: префиксы складываются ("a-b-")."""
        return NamespacedView(self.parent, self.prefix + id, self._parent_index)


__all__ = [
    "DataStore",
    "NamespacedView",
    "is_truthy",
    "to_value",
    "TRUE_VALUE",
    "FALSE_VALUE",
]
