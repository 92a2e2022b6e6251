from pathlib import Path

import pytest

from scaffold.template.cache import TemplateCache
from scaffold.template.parser import TemplateParser

from tests.infrastructure import CountingLoader, write_templates


@pytest.fixture(autouse=True)
def _clean_scaffold_env(monkeypatch):
    # переменные окружения разработчика не должны влиять на тесты
    for name in ("SCAFFOLD_CACHE", "SCAFFOLD_ROOT", "SCAFFOLD_DEBUG"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cache() -> TemplateCache:
    return TemplateCache()


@pytest.fixture
def make_parser(cache):
    """Фабрика: парсер поверх CountingLoader с общим кэшем."""
    def _make(templates: dict) -> TemplateParser:
        return TemplateParser(CountingLoader(templates), cache)
    return _make


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Небольшое дерево шаблонов на диске."""
    return write_templates(tmp_path, {
        "views/home.html": 'Hi {{name}}, {{show}}shown text {{/show}}end.',
        "views/layout.html": (
            "<header>{{title}}</header>\n"
            "{{menu}}<ul>{{items}}</ul>{{/menu}}\n"
            "{{footer}}<footer>{{year}}</footer>{{/footer}}\n"
        ),
        "views/page.html": '<main>{{card "/partials/card.html" title:"Hello"}}</main>',
        "partials/card.html": '<div class="card"><b>{{title}}</b>{{note}}<i>{{text}}</i>{{/note}}</div>',
    })
