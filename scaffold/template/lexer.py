"""
Лексический анализ шаблонов Scaffold.

Исходный текст режется по литеральному разделителю "{{". Каждый фрагмент —
это «заголовок тега (если есть) + литеральный текст после него». Здесь же
живут классификация фрагментов (включение / аргумент-путь / встроенные
аргументы / чистый текст), разбор списка аргументов key:"value", поиск
именованной секции и переименование тегов отрендеренного включения.

Разновидности тегов:

    {{title}}                                   переменная
    {{address}} ... {{/address}}                блок
    {{button "/ui/button-medium"}}              включение другого файла
    {{button "/ui/button" title:"save"}}        включение с переменными
    {{row key:"value", other:"x"}}              тег со встроенными аргументами
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .elements import Element, FieldIndex
from ..errors import InlineVarsError

OPEN = "{{"
CLOSE = "}}"

# Максимальное расстояние от "{{" открывающего тега секции до первой "}"
SECTION_TAG_LIMIT = 256

_PAIR_RE = re.compile(
    r'\s*(?:"(?P<qkey>(?:[^"\\]|\\.)*)"|(?P<key>[A-Za-z0-9_.\-]+))'
    r'\s*:\s*'
    r'(?:"(?P<qval>(?:[^"\\]|\\.)*)"|(?P<val>[^,\s"{}]+))\s*'
)


@dataclass(frozen=True)
class PartialTag:
    """Фрагмент, распознанный как включение {{name "path" key:"v"}}."""
    name: str
    path: str
    vars: Dict[str, str] = field(default_factory=dict)
    end: int = 0         # позиция в фрагменте сразу после "}}"

    @property
    def prefix(self) -> str:
        return self.name + "-"


def split_fragments(text: str) -> List[str]:
    """Режет текст по "{{". Первый фрагмент — всегда текст до первого тега."""
    return text.split(OPEN)


def join_fragments(fragments: List[str]) -> str:
    return OPEN.join(fragments)


def _unquote(value: str, position: int, text: str) -> str:
    try:
        return json.loads('"' + value + '"')
    except ValueError as e:
        raise InlineVarsError(f"Bad escape sequence ({e.__class__.__name__})", text, position) from e


def parse_inline_vars(text: str) -> Dict[str, str]:
    """
    Разбирает список аргументов вида key:"value", key2:"value2".

    Допускаются внешние фигурные скобки, ключи в кавычках и без,
    значения без кавычек (числа, true/false) и завершающая запятая.
    Все значения возвращаются строками.

    Raises:
        InlineVarsError: Если текст не является таким списком
    """
    body = text.strip()
    if body.startswith("{") and body.endswith("}"):
        body = body[1:-1]

    result: Dict[str, str] = {}
    pos = 0
    length = len(body)
    if not body.strip():
        raise InlineVarsError("Empty argument list", text, 0)

    while pos < length:
        m = _PAIR_RE.match(body, pos)
        if not m:
            raise InlineVarsError("Expected key:\"value\" pair", text, pos)

        if m.group("qkey") is not None:
            key = _unquote(m.group("qkey"), m.start("qkey"), text)
        else:
            key = m.group("key")

        if m.group("qval") is not None:
            value = _unquote(m.group("qval"), m.start("qval"), text)
        else:
            value = m.group("val")

        result[key] = value
        pos = m.end()
        if pos >= length:
            break
        if body[pos] != ",":
            raise InlineVarsError("Expected ','", text, pos)
        pos += 1
        if not body[pos:].strip():
            # завершающая запятая
            break

    return result


def match_partial(fragment: str) -> Optional[PartialTag]:
    """
    Проверяет, является ли фрагмент включением другого шаблона.

    Фрагмент — включение, если в нём есть "}}", перед ней есть кавычка,
    а двоеточие (если есть) стоит после кавычки. Так {{button "path"}}
    отличается от {{row key:"value"}}.
    """
    end = fragment.find(CLOSE)
    quote = fragment.find('"')
    if end <= 0 or quote <= 0 or quote >= end - 2:
        return None

    header = fragment[:end]
    colon = header.find(":")
    if 0 <= colon < quote:
        return None

    closing_quote = header.find('"', quote + 1)
    if closing_quote < 0:
        return None

    name = header[:quote].strip()
    path = header[quote + 1:closing_quote]
    if not name or name.startswith("/") or not path:
        return None

    overrides: Dict[str, str] = {}
    tail = header[closing_quote + 1:].strip()
    if ":" in tail:
        try:
            overrides = parse_inline_vars(tail)
        except InlineVarsError:
            overrides = {}

    return PartialTag(name=name, path=path, vars=overrides, end=end + len(CLOSE))


def _split_header(header: str) -> Tuple[str, str]:
    """Делит заголовок тега на имя и хвост с аргументами."""
    stripped = header.strip()
    for i, ch in enumerate(stripped):
        if ch.isspace():
            return stripped[:i], stripped[i:].strip()
    return stripped, ""


def _path_argument(header: str) -> Tuple[Optional[str], str]:
    """
    Аргумент в кавычках, если кавычка стоит строго раньше любого двоеточия.

    Возвращает (path, хвост после закрывающей кавычки).
    """
    quote = header.find('"')
    if quote < 0:
        return None, ""
    colon = header.find(":")
    if 0 <= colon <= quote:
        return None, ""
    closing_quote = header.find('"', quote + 1)
    if closing_quote < 0:
        return None, ""
    return header[quote + 1:closing_quote], header[closing_quote + 1:].strip()


def parse_fragment(fragment: str) -> Element:
    """
    Превращает один фрагмент (после "{{") в Element.

    Фрагмент без "}}" считается чистым текстом; разделитель "{{",
    по которому его отрезали, возвращается в текст.
    """
    end = fragment.find(CLOSE)
    if end <= 0:
        return Element(name="", text=OPEN + fragment)

    header = fragment[:end]
    name, args = _split_header(header)
    if not name:
        return Element(name="", text=OPEN + fragment)

    element = Element(name=name, text=fragment[end + len(CLOSE):], raw=header.strip())

    path, tail = _path_argument(header)
    if path is not None:
        element.path = path
        if ":" in tail:
            try:
                element.vars = parse_inline_vars(tail)
            except InlineVarsError:
                element.vars = {}
    elif args:
        try:
            element.vars = parse_inline_vars(args)
        except InlineVarsError:
            element.vars = {}

    return element


def tokenize(text: str) -> Tuple[List[Element], FieldIndex]:
    """
    Токенизирует текст без включений в последовательность элементов
    и строит индекс полей.
    """
    fragments = split_fragments(text)
    elements: List[Element] = [Element(name="", text=fragments[0])]
    index = FieldIndex()

    for fragment in fragments[1:]:
        element = parse_fragment(fragment)
        position = len(elements)
        if element.name and not element.is_closing:
            index.add(element.name, position)
        elements.append(element)

    return elements, index


def extract_section(text: str, section: str) -> Optional[str]:
    """
    Вырезает содержимое секции {{section}} ... {{/section}}.

    Открывающий тег должен в точности называться section (аргументы
    допускаются). Если от "{{" до первой "}" больше SECTION_TAG_LIMIT
    символов, поиск прекращается. Возвращает None, если секция не найдена.
    """
    if not section:
        return None

    needle = OPEN + section
    start = text.find(needle)
    while start >= 0:
        after = start + len(needle)
        if after < len(text) and (text[after] == "}" or text[after].isspace()):
            break
        start = text.find(needle, start + 1)
    if start < 0:
        return None

    brace = text.find("}", start)
    if brace < 0 or brace - start > SECTION_TAG_LIMIT:
        return None

    tag_end = text.find(CLOSE, start)
    if tag_end < 0:
        return None
    body_start = tag_end + len(CLOSE)

    body_end = text.find(OPEN + "/" + section + CLOSE, body_start)
    if body_end < 0:
        return None
    return text[body_start:body_end]


def prefix_tags(html: str, prefix: str) -> str:
    """
    Добавляет prefix к имени каждого тега: {{x → {{<prefix>x, {{/x → {{/<prefix>x.
    """
    out: List[str] = []
    pos = 0
    while True:
        found = html.find(OPEN, pos)
        if found < 0:
            out.append(html[pos:])
            break
        head = found + len(OPEN)
        if html.startswith("/", head):
            head += 1
        out.append(html[pos:head])
        out.append(prefix)
        pos = head
    return "".join(out)


__all__ = [
    "OPEN",
    "CLOSE",
    "SECTION_TAG_LIMIT",
    "PartialTag",
    "split_fragments",
    "join_fragments",
    "parse_inline_vars",
    "match_partial",
    "parse_fragment",
    "tokenize",
    "extract_section",
    "prefix_tags",
]
