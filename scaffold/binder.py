"""
Привязка структурированных значений к данным шаблона.

Вместо рефлексии используется явный контракт: объект перечисляет свои
поля парами (ключ, значение). Поддерживаются:
  • объекты с методом scaffold_fields() (протокол Bindable)
  • dataclass-экземпляры
  • pydantic-модели
  • отображения (dict и т.п.)

Скаляры сериализуются по фиксированным правилам: bool → "1"/"0",
дата/время → строка в формате локали, числа и строки → str(). None
пропускается, вложенные структуры разворачиваются в ключи через точку.
"""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Protocol, Tuple, runtime_checkable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DATETIME_FORMAT = "%x %X"
DATE_FORMAT = "%x"
TIME_FORMAT = "%X"


@runtime_checkable
class Bindable(Protocol):
    """Объект, который сам перечисляет свои поля для привязки."""

    def scaffold_fields(self) -> Iterable[Tuple[str, Any]]:
        ...


def iter_fields(obj: Any) -> Optional[Iterable[Tuple[str, Any]]]:
    """Пары (имя, значение) структурированного объекта или None для скаляров."""
    if isinstance(obj, Bindable):
        return obj.scaffold_fields()
    if is_dataclass(obj) and not isinstance(obj, type):
        return [(f.name, getattr(obj, f.name)) for f in fields(obj)]
    if isinstance(obj, BaseModel):
        return [(name, getattr(obj, name)) for name in type(obj).model_fields]
    if isinstance(obj, Mapping):
        return list(obj.items())
    return None


def scalar_value(value: Any) -> Optional[str]:
    """Строковое представление скаляра или None, если значение не скалярное."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, time):
        return value.strftime(TIME_FORMAT)
    if isinstance(value, Enum):
        return scalar_value(value.value)
    if isinstance(value, (str, int, float, Decimal)):
        return str(value)
    return None


def bind(target: MutableMapping[str, str], obj: Any, root: str = "") -> None:
    """
    Записывает поля obj в target под ключами "root.field" (в нижнем регистре).

    Args:
        target: Хранилище данных (DataStore или NamespacedView)
        obj: Структурированное значение
        root: Префикс ключей для вложенных значений

    Raises:
        TypeError: Если obj не является структурированным значением
    """
    if obj is None:
        return

    items = iter_fields(obj)
    if items is None:
        raise TypeError(f"Cannot bind value of type {type(obj).__name__}")

    for field_name, value in items:
        if value is None:
            continue
        key = (root + "." if root else "") + str(field_name).lower()

        scalar = scalar_value(value)
        if scalar is not None:
            target[key] = scalar
            continue

        if iter_fields(value) is not None:
            bind(target, value, key)
        else:
            logger.debug(f"Skipping non-bindable field '{key}' ({type(value).__name__})")


__all__ = ["Bindable", "bind", "iter_fields", "scalar_value"]
