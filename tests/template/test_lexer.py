"""
Тесты лексического анализа шаблонов Scaffold.

Проверяет:
- разбиение текста по "{{" и разбор отдельных фрагментов
- распознавание включений {{name "path" ...}} против {{row key:"v"}}
- разбор встроенных аргументов key:"value"
- поиск именованной секции
- переименование тегов включения
"""

import pytest

from scaffold.errors import InlineVarsError
from scaffold.template.lexer import (
    SECTION_TAG_LIMIT,
    extract_section,
    match_partial,
    parse_fragment,
    parse_inline_vars,
    prefix_tags,
    split_fragments,
    tokenize,
)


class TestFragments:
    """Разбиение и разбор фрагментов."""

    def test_split_keeps_leading_text_first(self):
        assert split_fragments("a{{b}}c") == ["a", "b}}c"]
        assert split_fragments("{{b}}c") == ["", "b}}c"]

    def test_variable_fragment(self):
        el = parse_fragment("name}}, ")
        assert el.name == "name"
        assert el.text == ", "
        assert el.path is None
        assert el.vars == {}

    def test_closing_fragment(self):
        el = parse_fragment("/show}}end.")
        assert el.name == "/show"
        assert el.is_closing
        assert el.text == "end."

    def test_inline_vars(self):
        el = parse_fragment('row key:"v", other:"x y"}}X')
        assert el.name == "row"
        assert el.vars == {"key": "v", "other": "x y"}
        assert el.path is None
        assert el.text == "X"
        assert el.raw == 'row key:"v", other:"x y"'

    def test_malformed_inline_vars_are_dropped(self):
        el = parse_fragment('row key:"v}}tail')
        assert el.name == "row"
        assert el.vars == {}
        assert el.text == "tail"

    def test_path_argument(self):
        el = parse_fragment('icon "star" size:"2"}}t')
        assert el.name == "icon"
        assert el.path == "star"
        assert el.vars == {"size": "2"}

    def test_fragment_without_terminator_is_literal(self):
        el = parse_fragment("not a tag")
        assert el.name == ""
        assert el.text == "{{not a tag"

    def test_empty_tag_is_literal(self):
        el = parse_fragment("}}rest")
        assert el.name == ""
        assert el.text == "{{}}rest"


class TestTokenize:
    """Токенизация и индекс полей."""

    def test_elements_and_index(self):
        elements, index = tokenize("Hi {{name}}, {{show}}shown text{{/show}}end.")

        assert [e.name for e in elements] == ["", "name", "show", "/show"]
        assert [e.text for e in elements] == ["Hi ", ", ", "shown text", "end."]
        assert index.positions("name") == (1,)
        assert index.positions("show") == (2,)
        assert "/show" not in index

    def test_repeated_names_keep_all_positions(self):
        _, index = tokenize("{{a}}1{{/a}}{{a}}2{{/a}}{{v}}")
        assert index.positions("a") == (1, 3)
        assert index.positions("v") == (5,)

    def test_plain_text(self):
        elements, index = tokenize("<p>no tags</p>")
        assert len(elements) == 1
        assert elements[0].text == "<p>no tags</p>"
        assert len(index) == 0


class TestPartialDetection:
    """Отличие включений от тегов с аргументами."""

    def test_partial_with_overrides(self):
        tag = match_partial('card "cards/item" title:"Hello"}}rest')
        assert tag is not None
        assert tag.name == "card"
        assert tag.path == "cards/item"
        assert tag.vars == {"title": "Hello"}
        assert tag.prefix == "card-"
        assert 'card "cards/item" title:"Hello"}}rest'[tag.end:] == "rest"

    def test_plain_partial(self):
        tag = match_partial('button "/ui/button-medium"}}')
        assert tag.name == "button"
        assert tag.path == "/ui/button-medium"
        assert tag.vars == {}

    @pytest.mark.parametrize("fragment", [
        'row key:"value"}}',       # двоеточие раньше кавычки
        "title}}",                 # нет кавычки
        'x "a"',                   # нет терминатора
        '"path"}}',                # нет имени
        'x "unterminated}}',       # нет закрывающей кавычки
        'x ""}}',                  # пустой путь
    ])
    def test_not_a_partial(self, fragment):
        assert match_partial(fragment) is None


class TestInlineVars:
    """Разбор списков key:"value"."""

    def test_basic(self):
        assert parse_inline_vars('key:"v", other:"x"') == {"key": "v", "other": "x"}

    def test_braces_quoted_keys_and_bare_values(self):
        assert parse_inline_vars('{ "a": "1", b: 2 }') == {"a": "1", "b": "2"}

    def test_trailing_comma(self):
        assert parse_inline_vars('a:"1",') == {"a": "1"}

    def test_escapes(self):
        assert parse_inline_vars(r'a:"say \"hi\""') == {"a": 'say "hi"'}

    @pytest.mark.parametrize("text", ['a:"1" b:"2"', "", "justtext", 'a:"1", ,'])
    def test_malformed(self, text):
        with pytest.raises(InlineVarsError):
            parse_inline_vars(text)


class TestSections:
    """Поиск секции {{name}} ... {{/name}}."""

    def test_extract(self):
        text = "head {{menu}}<ul>{{item}}</ul>{{/menu}} tail"
        assert extract_section(text, "menu") == "<ul>{{item}}</ul>"

    def test_open_tag_with_arguments(self):
        assert extract_section('{{menu cls:"x"}}A{{/menu}}', "menu") == "A"

    def test_requires_exact_name(self):
        text = "{{menus}}X{{/menus}}{{menu}}Y{{/menu}}"
        assert extract_section(text, "menu") == "Y"

    def test_not_found(self):
        assert extract_section("{{a}}x{{/a}}", "b") is None

    def test_missing_closer(self):
        assert extract_section("{{menu}}open forever", "menu") is None

    def test_overlong_open_tag_aborts(self):
        text = "{{sec" + " " * (SECTION_TAG_LIMIT + 10) + "}}body{{/sec}}"
        assert extract_section(text, "sec") is None


class TestPrefixTags:
    """Переименование тегов отрендеренного включения."""

    def test_opening_and_closing(self):
        html = "<b>{{title}}</b>{{show}}x{{/show}}"
        assert prefix_tags(html, "p-") == "<b>{{p-title}}</b>{{p-show}}x{{/p-show}}"

    def test_no_tags(self):
        assert prefix_tags("<b>Hello</b>", "p-") == "<b>Hello</b>"
