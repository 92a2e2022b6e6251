"""
Тесты рендерера: сопоставление блоков, видимость, подстановка и
доступ к содержимому блока.
"""

import pytest

from scaffold.data import DataStore
from scaffold.errors import TemplateCloneError
from scaffold.template.elements import Element, clone_elements
from scaffold.template.lexer import tokenize
from scaffold.template.renderer import BlockSpan, get_block, pair_blocks, render_elements


def els(text: str):
    return tokenize(text)[0]


SCENARIO = "Hi {{name}}, {{show}}shown text{{/show}}end."


class TestVisibility:

    def test_text_without_tags_is_unchanged(self):
        text = "<p>Plain & simple</p>\n"
        assert render_elements(els(text), {}) == text

    def test_empty_sequence(self):
        assert render_elements([], {"a": "1"}) == ""

    def test_hidden_block_is_omitted(self):
        assert render_elements(els(SCENARIO), {"name": "Sam"}) == "Hi Sam, end."

    def test_shown_block_is_concatenated_exactly(self):
        # между литералами не добавляется никаких разделителей
        data = {"name": "Sam", "show": "1"}
        assert render_elements(els(SCENARIO), data) == "Hi Sam, shown textend."

    def test_shown_block_with_source_spacing(self):
        text = "Hi {{name}}, {{show}}shown text {{/show}}end."
        assert render_elements(els(text), {"name": "Sam", "show": "1"}) == "Hi Sam, shown text end."

    @pytest.mark.parametrize("value,visible", [
        ("1", True),
        ("true", True),
        ("True", True),
        ("0", False),
        ("yes", False),
        ("", False),
    ])
    def test_flag_coercion(self, value, visible):
        out = render_elements(els("a{{tip}}TIP{{/tip}}b"), {"tip": value})
        assert out == ("aTIPb" if visible else "ab")

    def test_nested_blocks(self):
        elements = els("<{{outer}}O{{inner}}I{{/inner}}{{/outer}}>")
        assert render_elements(elements, {"outer": "1"}) == "<O>"
        assert render_elements(elements, {"outer": "1", "inner": "1"}) == "<OI>"
        assert render_elements(elements, {"inner": "1"}) == "<>"

    def test_sibling_blocks_are_independent(self):
        elements = els("{{a}}X{{/a}}-{{b}}Y{{/b}}")
        assert render_elements(elements, {"b": "1"}) == "-Y"


class TestSubstitution:

    def test_unknown_variable_is_empty(self):
        assert render_elements(els("a{{missing}}b"), {}) == "ab"

    def test_empty_value(self):
        assert render_elements(els("a{{v}}b"), {"v": ""}) == "ab"

    def test_closing_tag_adds_nothing_by_default(self):
        elements = els("{{tip}}TIP{{/tip}}!")
        assert render_elements(elements, {"tip": "1"}) == "TIP!"
        assert render_elements(elements, {"tip": "1", "/tip": "~"}) == "TIP~!"

    def test_block_name_is_not_substituted(self):
        # значение флага блока не попадает в вывод
        assert render_elements(els("{{tip}}TIP{{/tip}}"), {"tip": "1"}) == "TIP"

    def test_deferred_mode_keeps_unresolved_tags(self):
        elements = els("A{{flag}}B{{/flag}}C{{v}}D{{w}}")
        out = render_elements(elements, {"v": "x"}, hide_elements=False)
        assert out == "A{{flag}}B{{/flag}}CxD{{w}}"

    def test_deferred_mode_keeps_tag_arguments(self):
        out = render_elements(els('x{{row key:"v"}}y'), {}, hide_elements=False)
        assert out == 'x{{row key:"v"}}y'

    def test_accepts_data_store(self):
        data = DataStore({"name": "Sam"})
        data.set_flag("show")
        assert render_elements(els(SCENARIO), data) == "Hi Sam, shown textend."


class TestBlockPairing:

    def test_first_closer_wins(self):
        elements = els("{{a}}1{{a}}2{{/a}}3{{/a}}4")
        assert pair_blocks(elements) == [BlockSpan("a", 1, 3), BlockSpan("a", 2, 3)]

    def test_same_name_nesting_is_not_depth_aware(self):
        elements = els("{{a}}1{{a}}2{{/a}}3{{/a}}4")
        assert render_elements(elements, {}) == "34"
        assert render_elements(elements, {"a": "1"}) == "1234"

    def test_siblings_pair_independently(self):
        elements = els("{{a}}X{{/a}}{{a}}Y{{/a}}")
        assert pair_blocks(elements) == [BlockSpan("a", 1, 2), BlockSpan("a", 3, 4)]

    def test_variables_are_not_blocks(self):
        assert pair_blocks(els("{{v}} {{w}}")) == []


class TestImmutability:

    def test_render_does_not_mutate_elements(self):
        elements = tuple(els(SCENARIO))
        before = clone_elements(elements)

        first = render_elements(elements, {"name": "Sam", "show": "1"})
        second = render_elements(elements, {"name": "Sam", "show": "1"})

        assert first == second
        assert list(elements) == before

    def test_non_element_aborts_render(self):
        with pytest.raises(TemplateCloneError):
            render_elements(["not an element"], {})

    def test_non_string_payload_aborts_render(self):
        with pytest.raises(TemplateCloneError):
            render_elements([Element(name="x", vars={"k": 1})], {})


class TestGetBlock:

    TEXT = "{{a}}A{{b}}B{{/b}}C{{v}}D{{/a}}E"

    def test_nested_tags_hidden(self):
        # текст после вложенных тегов пропускается, после закрывающих остаётся
        assert get_block(els(self.TEXT), {}, "a") == "AC"

    def test_nested_block_shown(self):
        assert get_block(els(self.TEXT), {"b": "1"}, "a") == "ABC"

    def test_nested_variable_with_true_flag_keeps_text(self):
        assert get_block(els(self.TEXT), {"v": "true"}, "a") == "ACD"

    def test_variable_value_is_not_substituted(self):
        assert get_block(els(self.TEXT), {"v": "x"}, "a") == "AC"

    def test_inner_block_directly(self):
        assert get_block(els(self.TEXT), {}, "b") == "B"

    def test_missing_block(self):
        assert get_block(els(self.TEXT), {}, "zzz") == ""
        assert get_block(els(self.TEXT), {}, "") == ""
