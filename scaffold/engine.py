"""
Публичный API движка Scaffold.

    engine = ScaffoldEngine.from_config(ScaffoldConfig.load())
    page = engine.template("/views/home.html")
    page["title"] = "Home"
    page.show("signed-in")
    html = page.render()

Scaffold можно создавать и напрямую — с собственным загрузчиком и кэшем:

    cache = TemplateCache()
    page = Scaffold("/views/home.html", cache=cache)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import ScaffoldConfig
from .data import DataStore, NamespacedView
from .template.cache import TemplateCache
from .template.elements import Element, FieldIndex, ParsedTemplate, PartialRecord
from .template.loader import FileSystemLoader, TemplateLoader
from .template.parser import TemplateParser
from .template.renderer import get_block, render_elements

logger = logging.getLogger(__name__)


class Scaffold:
    """
    Экземпляр шаблона: ссылка на разобранный снимок + собственные данные.

    Создаётся на один контекст рендеринга и никогда не изменяет общий снимок.
    """

    def __init__(
        self,
        path: str,
        section: str = "",
        cache: Optional[TemplateCache] = None,
        *,
        loader: Optional[TemplateLoader] = None,
        parser: Optional[TemplateParser] = None,
    ):
        """
        Args:
            path: Путь к файлу шаблона (ведущий "/" допускается)
            section: Имя секции внутри файла ({{section}} ... {{/section}})
            cache: Кэш разобранных шаблонов; None — без кэширования
            loader: Загрузчик текста (по умолчанию — файлы относительно CWD)
            parser: Готовый парсер (если задан, cache и loader игнорируются)
        """
        if parser is None:
            parser = TemplateParser(loader or FileSystemLoader(), cache)
        self.path = path
        self.section = section or ""
        self.parsed: ParsedTemplate = parser.parse(path, self.section)
        self.data = DataStore(self.parsed.default_data)

    # ---- Данные ---- #

    def __getitem__(self, key: str) -> str:
        return self.data.get_string(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self.data

    def update(self, values: Mapping[str, Any]) -> None:
        self.data.update(values)

    def show(self, block: str) -> None:
        """Делает блок {{block}} ... {{/block}} видимым."""
        self.data.set_flag(block, True)

    def hide(self, block: str) -> None:
        self.data.set_flag(block, False)

    def bind(self, obj: Any, root: str = "") -> None:
        """Записывает поля структурированного значения (см. scaffold.binder)."""
        from .binder import bind
        bind(self.data, obj, root)

    def child(self, id: str) -> NamespacedView:
        """Представление данных с префиксом "<id>-" (например, для включения id)."""
        return NamespacedView(self.data, id, self.parsed.field_index)

    # ---- Рендеринг ---- #

    def render(self, hide_elements: bool = True) -> str:
        return render_elements(self.parsed.elements, self.data, hide_elements)

    def get(self, name: str) -> str:
        """Литеральное содержимое блока name без полного рендеринга."""
        return get_block(self.parsed.elements, self.data, name)

    # ---- Интроспекция ---- #

    @property
    def elements(self) -> Tuple[Element, ...]:
        return self.parsed.elements

    @property
    def fields(self) -> FieldIndex:
        return self.parsed.field_index

    @property
    def partials(self) -> Tuple[PartialRecord, ...]:
        return self.parsed.partials

    def __repr__(self) -> str:
        return f"Scaffold(path={self.path!r}, section={self.section!r}, elements={len(self.elements)})"


class ScaffoldEngine:
    """
    Связка загрузчика, кэша и данных по умолчанию.

    default_data попадает только в данные экземпляров, но не в
    пред-рендеринг включений: разобранные снимки от него не зависят.

    Кэш живёт столько же, сколько движок. Один движок можно разделять
    между потоками: разбор каждого (path, section) выполняется один раз.
    """

    def __init__(
        self,
        loader: TemplateLoader,
        cache: Optional[TemplateCache] = None,
        *,
        default_data: Optional[Mapping[str, str]] = None,
    ):
        self.loader = loader
        self.cache = cache
        self.default_data: Dict[str, str] = dict(default_data or {})
        self.parser = TemplateParser(loader, cache)

    @classmethod
    def from_config(cls, config: ScaffoldConfig) -> ScaffoldEngine:
        logger.debug(f"Creating engine: root={config.root}, cache={config.cache}")
        return cls(
            config.create_loader(),
            config.create_cache(),
            default_data=config.default_data,
        )

    def template(self, path: str, section: str = "") -> Scaffold:
        """Новый экземпляр шаблона; данные засеваются default_data движка."""
        page = Scaffold(path, section, parser=self.parser)
        page.update(self.default_data)
        return page

    def render(self, path: str, data: Optional[Mapping[str, Any]] = None, *, section: str = "") -> str:
        """Удобный вызов: создать шаблон, заполнить данными, отрендерить."""
        page = self.template(path, section)
        if data:
            page.update(data)
        return page.render()


__all__ = ["Scaffold", "ScaffoldEngine"]
