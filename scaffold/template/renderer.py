"""
Рендеринг разобранного шаблона.

Этапы:
1. глубокая копия последовательности элементов (кэш остаётся нетронутым);
2. сопоставление блоков: для каждой позиции x ищется первая дальше по
   последовательности позиция y с именем "/" + name(x);
3. видимость блока: ключ есть в данных и его флаговое значение истинно;
4. при hide_elements — удаление позиций [start, end) скрытых блоков;
5. подстановка значений и склейка текста.

Сопоставление намеренно не учитывает вложенность одноимённых блоков:
берётся первый найденный закрывающий тег.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Set

from .elements import Element, clone_elements
from ..data import is_truthy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockSpan:
    """Пара открывающего/закрывающего тегов блока."""
    name: str
    start: int
    end: int


def find_closer(elements: Sequence[Element], start: int) -> Optional[int]:
    """Позиция первого "/" + name после start или None."""
    name = elements[start].name
    if not name or name.startswith("/"):
        return None
    closer = "/" + name
    for y in range(start + 1, len(elements)):
        if elements[y].name == closer:
            return y
    return None


def pair_blocks(elements: Sequence[Element]) -> List[BlockSpan]:
    spans: List[BlockSpan] = []
    for x in range(len(elements)):
        y = find_closer(elements, x)
        if y is not None:
            spans.append(BlockSpan(elements[x].name, x, y))
    return spans


def is_visible(name: str, data: Mapping[str, str]) -> bool:
    return name in data and is_truthy(data.get(name))


def render_elements(
    elements: Sequence[Element],
    data: Mapping[str, str],
    hide_elements: bool = True,
) -> str:
    """
    Рендерит последовательность элементов с данными.

    Args:
        elements: Элементы разобранного шаблона (не изменяются)
        data: Данные шаблона
        hide_elements: Скрывать невидимые блоки и убирать теги без подстановки.
            False используется при пред-рендеринге включения: теги блоков
            сохраняются, чтобы их видимость решил включающий шаблон.

    Returns:
        Итоговый текст
    """
    if not elements:
        return ""

    elems = clone_elements(elements)
    spans = pair_blocks(elems)
    block_names: Set[str] = {span.name for span in spans}

    if hide_elements:
        hidden: Set[int] = set()
        for span in spans:
            if not is_visible(span.name, data):
                hidden.update(range(span.start, span.end))
        if hidden:
            elems = [el for i, el in enumerate(elems) if i not in hidden]

    for el in elems:
        name = el.name
        if not name:
            continue
        if el.is_closing:
            if hide_elements:
                # ключ "/name" обычно отсутствует: подставляется пустая строка
                el.text = (data.get(name) or "") + el.text
            else:
                el.text = el.tag() + el.text
        elif name in data and name not in block_names:
            el.text = (data.get(name) or "") + el.text
        elif not hide_elements:
            el.text = el.tag() + el.text

    return "".join(el.text for el in elems)


def _collect(elements: Sequence[Element], data: Mapping[str, str], index: int) -> str:
    closer = "/" + elements[index].name
    parts: List[str] = [elements[index].text]
    x = index + 1
    while x < len(elements):
        el = elements[x]
        if el.name == closer:
            break
        if not el.name or el.is_closing:
            parts.append(el.text)
            x += 1
            continue

        end = find_closer(elements, x)
        if end is None:
            # тег без пары: его текст попадает в блок только при истинном флаге
            if is_truthy(data.get(el.name)):
                parts.append(el.text)
            x += 1
            continue

        if is_truthy(data.get(el.name)):
            parts.append(_collect(elements, data, x))
        x = end

    return "".join(parts)


def get_block(elements: Sequence[Element], data: Mapping[str, str], name: str) -> str:
    """
    Литеральное содержимое первого блока name.

    Вложенные теги (блоки и одиночные теги) включаются вместе со своим
    текстом, только если их флаг в данных истинен; текст после
    закрывающих тегов включается всегда.
    Пустая строка, если блока с таким именем нет.
    """
    if not name or name.startswith("/"):
        return ""
    for index, el in enumerate(elements):
        if el.name == name:
            return _collect(elements, data, index)
    logger.debug(f"Block '{name}' not found")
    return ""


__all__ = [
    "BlockSpan",
    "find_closer",
    "pair_blocks",
    "is_visible",
    "render_elements",
    "get_block",
]
