"""
Tests for the tag/class -> formatting flag tables.
"""

import pytest

from html2odf.formats import (
    FormatFlag,
    classify,
    linebreak_after,
    style_key,
    tag_rule,
    text_properties,
)


class TestClassify:

    @pytest.mark.parametrize("tag, expected", [
        ("b", {FormatFlag.BOLD}),
        ("strong", {FormatFlag.BOLD}),
        ("i", {FormatFlag.ITALIC}),
        ("em", {FormatFlag.ITALIC}),
        ("s", {FormatFlag.STRIKE}),
        ("u", {FormatFlag.UNDERLINE}),
        ("sub", {FormatFlag.SUBSCRIPT}),
        ("sup", {FormatFlag.SUPERSCRIPT}),
        ("del", {FormatFlag.DELETE}),
        ("ins", {FormatFlag.INSERT}),
        ("a", {FormatFlag.LINK}),
        ("ul", {FormatFlag.INDENT}),
        ("ol", {FormatFlag.INDENT}),
        ("h1", {FormatFlag.BOLD}),
        ("h6", {FormatFlag.BOLD}),
        ("p", set()),
        ("div", set()),
        ("br", set()),
        ("li", set()),
        ("span", set()),
        ("blockquote", set()),
    ])
    def test_tag_flags(self, tag, expected):
        assert classify(tag) == frozenset(expected)

    def test_class_flags_are_added(self):
        """Recognized classes add their flags to the tag's own."""
        assert classify("b", "underline inserted") == {
            FormatFlag.BOLD, FormatFlag.UNDERLINE, FormatFlag.INSERT,
        }
        assert classify("span", ["del", "superscript"]) == {
            FormatFlag.DELETE, FormatFlag.SUPERSCRIPT,
        }

    def test_unknown_classes_are_ignored(self):
        assert classify("span", "fancy highlight") == frozenset()

    def test_unknown_tag_behaves_like_span(self):
        assert tag_rule("marquee") == tag_rule("span")
        assert classify("marquee", "strike") == {FormatFlag.STRIKE}

    def test_tag_names_are_case_insensitive(self):
        assert classify("STRONG") == {FormatFlag.BOLD}

    def test_heading_styles(self):
        assert tag_rule("h1").style == "H1"
        assert tag_rule("h3").style == "H3"
        assert tag_rule("h4").style == "H4"
        assert tag_rule("h6").style == "H4"

    def test_only_list_items_need_intermediate_paragraphs(self):
        assert tag_rule("li").needs_intermediate_p
        assert not tag_rule("ul").needs_intermediate_p
        assert not tag_rule("p").needs_intermediate_p


class TestLinebreakAfter:

    @pytest.mark.parametrize("tag", ["br", "div", "p", "li", "blockquote"])
    def test_block_tags_break(self, tag):
        assert linebreak_after(tag) == {FormatFlag.LINEBREAK}

    @pytest.mark.parametrize("tag", ["h1", "h2", "h5"])
    def test_headings_break_bold(self, tag):
        assert linebreak_after(tag) == {FormatFlag.LINEBREAK, FormatFlag.BOLD}

    @pytest.mark.parametrize("tag", ["b", "span", "a", "ul", "unknown"])
    def test_inline_tags_do_not_break(self, tag):
        assert linebreak_after(tag) is None


class TestStyleKey:

    def test_order_independent(self):
        assert style_key([FormatFlag.ITALIC, FormatFlag.BOLD]) == "1_2"
        assert style_key({FormatFlag.BOLD, FormatFlag.ITALIC}) == "1_2"

    def test_numeric_sort(self):
        assert style_key([FormatFlag.SUBSCRIPT, FormatFlag.INSERT]) == "5_10"


class TestTextProperties:

    def test_bold(self):
        props = text_properties(FormatFlag.BOLD)
        assert props["fo:font-weight"] == "bold"
        assert props["style:font-weight-asian"] == "bold"
        assert props["style:font-weight-complex"] == "bold"

    def test_insert_uses_configured_color(self):
        props = text_properties(FormatFlag.INSERT, color_ins="#123456")
        assert props["fo:color"] == "#123456"
        assert props["style:text-underline-style"] == "solid"

    def test_delete_defaults(self):
        props = text_properties(FormatFlag.DELETE)
        assert props["fo:color"] == "#880000"
        assert props["style:text-line-through-type"] == "single"

    def test_positions(self):
        assert text_properties(FormatFlag.SUPERSCRIPT) == {"style:text-position": "super 58%"}
        assert text_properties(FormatFlag.SUBSCRIPT) == {"style:text-position": "sub 58%"}

    @pytest.mark.parametrize("flag", [FormatFlag.LINK, FormatFlag.INDENT, FormatFlag.LINEBREAK])
    def test_structural_flags_have_no_properties(self, flag):
        assert text_properties(flag) == {}
