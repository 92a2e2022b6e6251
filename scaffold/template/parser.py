"""
Парсер шаблонов Scaffold.

parse(path, section):
1. поиск в кэше по (path, section) — при попадании снимок возвращается как есть;
2. загрузка текста через загрузчик; пустой или отсутствующий источник
   даёт пустой шаблон (без ошибки);
3. при запрошенной секции — вырезание её содержимого (если секция не
   найдена, используется весь текст);
4-5. раскрытие включений до неподвижной точки: первый найденный фрагмент-
   включение рендерится (с отложенной видимостью блоков), все его теги
   получают префикс "<name>-", результат вклеивается в текст и разбор
   начинается заново;
6. токенизация и построение индекса полей;
7. сохранение неизменяемого снимка в кэш.

Циклические включения не обнаруживаются: авторы шаблонов не должны
создавать циклы.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import List, Optional, Tuple

from .cache import TemplateCache
from .elements import ParsedTemplate, PartialRecord
from .lexer import (
    PartialTag,
    extract_section,
    join_fragments,
    match_partial,
    prefix_tags,
    split_fragments,
    tokenize,
)
from .loader import TemplateLoader
from .renderer import render_elements
from ..data import DataStore

logger = logging.getLogger(__name__)


class TemplateParser:
    """
    Разбирает шаблоны в неизменяемые снимки ParsedTemplate.

    Все включения проходят через тот же парсер и тот же кэш.
    """

    def __init__(
        self,
        loader: TemplateLoader,
        cache: Optional[TemplateCache] = None,
    ):
        """
        Args:
            loader: Загрузчик исходного текста
            cache: Кэш снимков; None — разбирать при каждом вызове
        """
        self.loader = loader
        self.cache = cache

    def parse(self, path: str, section: str = "") -> ParsedTemplate:
        """
        Возвращает разобранный шаблон для (path, section).

        Args:
            path: Логический путь к шаблону
            section: Имя секции внутри файла или "" для всего файла

        Returns:
            Снимок из кэша или только что разобранный
        """
        section = section or ""
        if self.cache is None:
            return self._parse_source(path, section)

        with self.cache.lock:
            cached = self.cache.get(path, section)
            if cached is not None:
                logger.debug(f"Template cache hit: '{path}' [{section}]")
                return cached

            parsed = self._parse_source(path, section)
            if parsed.is_empty:
                return parsed
            return self.cache.put(path, section, parsed)

    # ======= Внутренние методы =======

    def _parse_source(self, path: str, section: str) -> ParsedTemplate:
        text = self.loader.load(path)
        if not text or not text.strip():
            logger.debug(f"Template '{path}' is empty or missing")
            return ParsedTemplate.empty()

        if section:
            body = extract_section(text, section)
            if body is None:
                logger.debug(f"Section '{section}' not found in '{path}', using whole file")
            else:
                text = body

        text, partials = self._expand_partials(text)
        elements, index = tokenize(text)
        logger.debug(
            f"Parsed template '{path}' [{section}] -> {len(elements)} elements, "
            f"{len(partials)} partials"
        )

        return ParsedTemplate(
            default_data=MappingProxyType({}),
            elements=tuple(elements),
            field_index=index,
            partials=tuple(partials),
        )

    def _expand_partials(self, text: str) -> Tuple[str, List[PartialRecord]]:
        """Раскрывает включения, пока в тексте не останется ни одного."""
        partials: List[PartialRecord] = []

        while True:
            fragments = split_fragments(text)
            for x in range(1, len(fragments)):
                tag = match_partial(fragments[x])
                if tag is None:
                    continue

                html, nested = self._render_partial(tag)
                record = PartialRecord(name=tag.name, path=tag.path, prefix=tag.prefix)
                partials.append(record)
                partials.extend(p.under(record.prefix) for p in nested)

                head = join_fragments(fragments[:x])
                tail = "".join("{{" + f for f in fragments[x + 1:])
                text = head + html + fragments[x][tag.end:] + tail
                break
            else:
                return text, partials

    def _render_partial(self, tag: PartialTag) -> Tuple[str, Tuple[PartialRecord, ...]]:
        """
        Рендерит включение с отложенной видимостью блоков и
        переименовывает его теги префиксом "<name>-".
        """
        logger.debug(f"Expanding partial '{tag.name}' from '{tag.path}'")
        parsed = self.parse(tag.path, "")

        data = DataStore(parsed.default_data)
        data.update(tag.vars)

        html = render_elements(parsed.elements, data, hide_elements=False)
        return prefix_tags(html, tag.prefix), parsed.partials


__all__ = ["TemplateParser"]
