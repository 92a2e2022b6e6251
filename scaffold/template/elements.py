"""
Модель элементов разобранного шаблона.

Шаблон представляется упорядоченной последовательностью элементов:
каждый элемент — это тег (возможно пустой) и литеральный текст, идущий
сразу за ним до следующего тега. Порядок элементов является основным
инвариантом: по позиции определяется, какой текст следует за каким тегом
и какие пары открывающих/закрывающих тегов охватывают какие диапазоны.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ..errors import TemplateCloneError


@dataclass
class Element:
    """
    Один элемент последовательности.

    name:  имя тега; пустая строка для чистого текста, "/name" для закрывающего тега
    path:  аргумент в кавычках ({{name "path"}}), если он есть
    text:  литеральный текст после тега до следующего тега
    vars:  встроенные аргументы тега ({{row key:"v"}} → {"key": "v"})
    raw:   содержимое тега как оно записано в исходнике (без {{ }})
    """
    name: str = ""
    text: str = ""
    path: Optional[str] = None
    vars: Dict[str, str] = field(default_factory=dict)
    raw: str = ""

    @property
    def is_literal(self) -> bool:
        return not self.name

    @property
    def is_closing(self) -> bool:
        return self.name.startswith("/")

    def tag(self) -> str:
        """Исходная запись тега, пригодная для повторного вывода."""
        return "{{" + (self.raw or self.name) + "}}" if self.name else ""


@dataclass(frozen=True)
class PartialRecord:
    """
    Запись о раскрытом включении (partial).

    Нужна только для интроспекции цепочки включений: для вложенных
    включений префиксы составляются как outer + inner.
    """
    name: str
    path: str
    prefix: str

    def under(self, outer_prefix: str) -> PartialRecord:
        """Та же запись, увиденная из включающего шаблона с префиксом outer_prefix."""
        return PartialRecord(name=self.name, path=self.path, prefix=outer_prefix + self.prefix)


class FieldIndex:
    """
    Индекс полей: имя тега → упорядоченные позиции в последовательности.

    Закрывающие теги и чистый текст в индекс не попадают.
    """

    def __init__(self, positions: Optional[Mapping[str, Sequence[int]]] = None):
        self._positions: Dict[str, List[int]] = {}
        for name, items in (positions or {}).items():
            self._positions[name] = list(items)

    def add(self, name: str, position: int) -> None:
        self._positions.setdefault(name, []).append(position)

    def positions(self, name: str) -> Tuple[int, ...]:
        return tuple(self._positions.get(name, ()))

    def subset(self, prefix: str) -> FieldIndex:
        """
        Подмножество индекса для имён, начинающихся с prefix.

        Префикс у ключей результата срезается.
        """
        return FieldIndex({
            name[len(prefix):]: items
            for name, items in self._positions.items()
            if name.startswith(prefix) and len(name) > len(prefix)
        })

    def as_dict(self) -> Dict[str, List[int]]:
        return {name: list(items) for name, items in self._positions.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldIndex):
            return NotImplemented
        return self._positions == other._positions

    def __repr__(self) -> str:
        return f"FieldIndex({self._positions!r})"


@dataclass(frozen=True)
class ParsedTemplate:
    """
    Неизменяемый снимок разобранного шаблона для пары (path, section).

    Создаётся один раз и читается многократно. Рендер обязан копировать
    элементы перед любыми изменениями (см. clone_elements).
    """
    default_data: Mapping[str, str]
    elements: Tuple[Element, ...]
    field_index: FieldIndex
    partials: Tuple[PartialRecord, ...] = ()

    @classmethod
    def empty(cls) -> ParsedTemplate:
        return cls(default_data=MappingProxyType({}), elements=(), field_index=FieldIndex())

    @property
    def is_empty(self) -> bool:
        return not self.elements


def _check_str(value: object, what: str, position: int) -> str:
    if not isinstance(value, str):
        raise TemplateCloneError(
            f"Element #{position} has non-string {what}: {type(value).__name__}"
        )
    return value


def clone_elements(elements: Sequence[Element]) -> List[Element]:
    """
    Глубокая копия последовательности элементов.

    Копирование определено явно над фиксированной формой Element.
    Всё, что в эту форму не укладывается, — нарушение инварианта
    и приводит к TemplateCloneError.
    """
    if elements is None:
        raise TemplateCloneError("Element sequence must not be None")

    result: List[Element] = []
    for position, element in enumerate(elements):
        if not isinstance(element, Element):
            raise TemplateCloneError(
                f"Element #{position} is {type(element).__name__}, not Element"
            )
        if element.path is not None:
            _check_str(element.path, "path", position)
        if not isinstance(element.vars, dict):
            raise TemplateCloneError(
                f"Element #{position} has non-dict vars: {type(element.vars).__name__}"
            )
        vars_copy = {
            _check_str(k, "vars key", position): _check_str(v, "vars value", position)
            for k, v in element.vars.items()
        }
        result.append(Element(
            name=_check_str(element.name, "name", position),
            text=_check_str(element.text, "text", position),
            path=element.path,
            vars=vars_copy,
            raw=_check_str(element.raw, "raw", position),
        ))
    return result


__all__ = [
    "Element",
    "PartialRecord",
    "FieldIndex",
    "ParsedTemplate",
    "clone_elements",
]
