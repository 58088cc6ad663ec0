"""Tests for tolgee_client.i18n.icu module."""

import datetime

import pytest

from tolgee_client.i18n.exceptions import MessageFormatError
from tolgee_client.i18n.icu import (
    Argument,
    Plural,
    argument_names,
    babel_locale,
    format_message,
    parse_message,
    plural_category,
)

pytestmark = pytest.mark.unit


class TestParseMessage:
    """Tests for the ICU parser."""

    def test_parses_literal_and_argument(self):
        nodes = parse_message("Hello {name}!")
        assert nodes == ("Hello ", Argument("name"), "!")

    def test_parses_plural_with_offset(self):
        (node,) = parse_message("{n, plural, offset:1 =0 {none} other {# more}}")
        assert isinstance(node, Plural)
        assert node.offset == 1
        assert [selector for selector, _ in node.options] == ["=0", "other"]

    def test_argument_names_in_first_appearance_order(self):
        """Names are collected pre-order, nested arguments included."""
        nodes = parse_message("{b} {a, plural, one {{c}} other {{b}}}")
        assert argument_names(nodes) == ["b", "a", "c"]

    @pytest.mark.parametrize(
        "template",
        [
            "Hello {name",
            "Hello name}",
            "{}",
            "{n, plural, one {x}}",
            "{n, plural, single {x} other {y}}",
            "{g, select, male {x} female {y}}",
            "{n, number, {x}}",
        ],
    )
    def test_malformed_template_raises(self, template):
        with pytest.raises(MessageFormatError):
            parse_message(template)

    def test_nesting_limit(self):
        template = "{a, select, other {" * 40 + "x" + "}}" * 40
        with pytest.raises(MessageFormatError):
            parse_message(template)


class TestFormatMessage:
    """Tests for rendering ICU templates."""

    def test_named_argument_bound_by_position(self):
        assert format_message("Hello {name}", ("World",), "en") == "Hello World"

    def test_repeated_name_uses_one_position(self):
        assert format_message("{x} and {x} then {y}", ("a", "b"), "en") == "a and a then b"

    def test_numbered_arguments(self):
        assert format_message("{1} before {0}", ("a", "b"), "en") == "b before a"

    def test_named_arguments_follow_numbered_ones(self):
        """Mixing numbered and named arguments never reuses a position."""
        assert format_message("{0} {name}", ("Hi", "Ana"), "en") == "Hi Ana"
        assert format_message("{name} {1} {other}", ("w", "x", "y", "z"), "en") == "y x z"

    def test_quoting(self):
        """Doubled apostrophes and quoted braces render literally."""
        assert format_message("It''s '{'literal'}'", (), "en") == "It's {literal}"

    def test_lone_apostrophe_is_literal(self):
        assert format_message("It's {name}", ("Ann",), "en") == "It's Ann"

    @pytest.mark.parametrize(
        "count,expected",
        [(0, "0 items"), (1, "1 item"), (2, "2 items"), (1000, "1,000 items")],
    )
    def test_plural_english(self, count, expected):
        template = "{count, plural, one {# item} other {# items}}"
        assert format_message(template, (count,), "en") == expected

    def test_plural_french_zero_is_one(self):
        template = "{count, plural, one {# élément} other {# éléments}}"
        assert format_message(template, (0,), "fr") == "0 élément"

    def test_plural_exact_match_wins(self):
        template = "{n, plural, =0 {none} one {one} other {#}}"
        assert format_message(template, (0,), "en") == "none"

    @pytest.mark.parametrize(
        "count,expected",
        [
            (1, "just you"),
            (2, "you and 1 other"),
            (3, "you and 2 others"),
        ],
    )
    def test_plural_offset(self, count, expected):
        template = (
            "{n, plural, offset:1 =0 {nobody} =1 {just you} "
            "one {you and # other} other {you and # others}}"
        )
        assert format_message(template, (count,), "en") == expected

    @pytest.mark.parametrize(
        "value,expected", [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th")]
    )
    def test_selectordinal(self, value, expected):
        template = "{n, selectordinal, one {#st} two {#nd} few {#rd} other {#th}}"
        assert format_message(template, (value,), "en") == expected

    @pytest.mark.parametrize(
        "value,expected", [("female", "She"), ("male", "He"), ("robot", "They")]
    )
    def test_select(self, value, expected):
        template = "{g, select, male {He} female {She} other {They}}"
        assert format_message(template, (value,), "en") == expected

    def test_pound_inside_select_nested_in_plural(self):
        template = "{count, plural, one {{g, select, other {# thing}}} other {# things}}"
        assert format_message(template, (1, "x"), "en") == "1 thing"

    def test_number_styles(self):
        assert format_message("{p, number, percent}", (0.25,), "en") == "25%"
        assert format_message("{n, number, integer}", (1234,), "en") == "1,234"
        assert format_message("{n, number}", (1234.5,), "de") == "1.234,5"

    def test_date_style(self):
        value = datetime.date(2024, 1, 5)
        assert format_message("{d, date, short}", (value,), "en") == "1/5/24"

    def test_null_and_boolean_values(self):
        assert format_message("{a}/{b}", (None, True), "en") == "null/true"

    def test_unknown_locale_uses_other_category(self):
        template = "{n, plural, one {one} other {other}}"
        assert format_message(template, (1,), None) == "other"

    def test_missing_argument_raises(self):
        with pytest.raises(MessageFormatError):
            format_message("Hello {name}", (), "en")

    def test_plural_of_non_number_raises(self):
        with pytest.raises(MessageFormatError):
            format_message("{n, plural, other {#}}", ("many",), "en")


class TestBabelLocale:
    """Tests for CLDR locale resolution."""

    def test_regional_tag(self):
        assert str(babel_locale("en-US")) == "en_US"

    def test_unknown_region_falls_back_to_language(self):
        assert str(babel_locale("fr-XZ")) == "fr"

    def test_unknown_language_is_none(self):
        assert babel_locale("qq") is None
        assert babel_locale(None) is None

    def test_plural_category(self):
        assert plural_category(1, "en") == "one"
        assert plural_category(5, "en") == "other"
        assert plural_category(3, "ru") == "few"
        assert plural_category(2, "en", ordinal=True) == "two"
