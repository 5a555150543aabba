"""
Test Message Templates
======================

Tests for template parsing, token rendering and the invariant format
specifiers used for the `_r` renderings.

Usage:
    pytest test_message_template.py
"""

import enum
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from compactlog.errors import TemplateRenderingError
from compactlog.parsing import (
    Destructuring,
    MessageTemplateParser,
    PropertyToken,
    TextToken,
    format_scalar,
    parse_template,
    render_value,
)
from compactlog.schemas import (
    DictionaryValue,
    LogEventProperty,
    ScalarValue,
    SequenceValue,
    StructureValue,
)


SAMPLE_TIME = datetime(2024, 1, 2, 15, 4, 5, 123456)


class Color(enum.IntEnum):
    RED = 1
    GREEN = 2


# ========== Parsing ==========

def test_parse_named_property_between_text():
    template = MessageTemplateParser().parse("Hello {Name}!")

    assert template.text == "Hello {Name}!"
    assert template.tokens == (
        TextToken("Hello "),
        PropertyToken("Name", "{Name}"),
        TextToken("!"),
    )


def test_parse_alignment_and_format():
    token = parse_template("{Value,-10:D4}").property_tokens[0]

    assert token.property_name == "Value"
    assert token.alignment == -10
    assert token.format == "D4"
    assert token.raw_text == "{Value,-10:D4}"


def test_format_may_contain_colons_and_commas():
    token = parse_template("{When:HH:mm:ss}").property_tokens[0]

    assert token.property_name == "When"
    assert token.format == "HH:mm:ss"


def test_parse_destructuring_hints():
    tokens = parse_template("{@User} {$Id} {Plain}").property_tokens

    assert [t.property_name for t in tokens] == ["User", "Id", "Plain"]
    assert [t.destructuring for t in tokens] == [
        Destructuring.DESTRUCTURE,
        Destructuring.STRINGIFY,
        Destructuring.DEFAULT,
    ]


def test_double_braces_are_literal():
    template = parse_template("{{literal}} {Name}")

    assert template.tokens[0] == TextToken("{literal} ")
    assert template.property_tokens[0].property_name == "Name"
    assert template.text == "{{literal}} {Name}"


@pytest.mark.parametrize("text", [
    "{Name",
    "{}",
    "{ }",
    "{Na me}",
    "{Name:}",
    "{Name,abc}",
    "{Name,0}",
    "{Name-x}",
])
def test_malformed_holes_become_text(text):
    template = parse_template(text)

    assert template.property_tokens == ()
    assert template.render({}) == text


def test_unmatched_open_brace_before_valid_hole():
    template = parse_template("a { b {Name}")

    assert [t.property_name for t in template.property_tokens] == ["Name"]
    assert template.render({}) == "a { b {Name}"


def test_positional_properties():
    template = parse_template("{0} + {1} = {Sum}")
    positional = parse_template("{0} and {1}")

    assert [t.position for t in template.property_tokens] == [0, 1, None]
    assert not template.has_positional_properties
    assert positional.has_positional_properties


def test_formatted_tokens_keep_template_order():
    template = parse_template("{B:F1} {Name} {A:D2}")

    assert [t.property_name for t in template.formatted_tokens] == ["B", "A"]


def test_parse_template_is_cached():
    assert parse_template("cached {A}") is parse_template("cached {A}")


def test_parse_none_gives_empty_template():
    template = MessageTemplateParser().parse(None)

    assert template.text == ""
    assert template.tokens == ()


# ========== Rendering ==========

def test_render_full_message():
    template = parse_template("Hello {Name}, you have {Count:D3} items")

    text = template.render({"Name": ScalarValue("Ada"), "Count": ScalarValue(7)})

    assert text == 'Hello "Ada", you have 007 items'


def test_render_literal_string_format():
    template = parse_template("Hello {Name:l}")

    assert template.render({"Name": ScalarValue("Ada")}) == "Hello Ada"


def test_missing_property_renders_raw_text():
    token = parse_template("{Missing,5:D4}").property_tokens[0]

    assert token.render_to_string({}) == "{Missing,5:D4}"


def test_alignment_pads_left_or_right():
    right = parse_template("{Count,5}").property_tokens[0]
    left = parse_template("{Count,-5}").property_tokens[0]
    properties = {"Count": ScalarValue(42)}

    assert right.render_to_string(properties) == "   42"
    assert left.render_to_string(properties) == "42   "


def test_render_composite_values():
    point = StructureValue(
        (LogEventProperty("X", ScalarValue(1)), LogEventProperty("Y", ScalarValue(2))),
        type_tag="Point",
    )

    assert render_value(SequenceValue([ScalarValue(1), ScalarValue("a")])) == '[1, "a"]'
    assert render_value(point) == "Point { X: 1, Y: 2 }"
    assert render_value(DictionaryValue({ScalarValue("a"): ScalarValue(1)})) == '[("a": 1)]'


def test_sequence_format_applies_to_each_element():
    value = SequenceValue([ScalarValue(1), ScalarValue(20)])

    assert render_value(value, "D3") == "[001, 020]"


# ========== Scalars ==========

@pytest.mark.parametrize("value, expected", [
    (None, "null"),
    (True, "True"),
    (False, "False"),
    ("abc", '"abc"'),
    ('a"b', '"a\\"b"'),
    (42, "42"),
    (1.5, "1.5"),
    (42.0, "42"),
    (1e20, "1E+20"),
    (Decimal("1.10"), "1.10"),
    (float("nan"), "NaN"),
    (float("inf"), "Infinity"),
    (float("-inf"), "-Infinity"),
    (Color.GREEN, "GREEN"),
    (b"\x01\xff", "01ff"),
])
def test_default_scalar_rendering(value, expected):
    assert format_scalar(value) == expected


def test_literal_format_only_changes_strings():
    assert format_scalar("abc", "l") == "abc"
    assert format_scalar(42, "l") == "42"


# ========== Numeric specifiers ==========

@pytest.mark.parametrize("value, spec, expected", [
    (42, "D4", "0042"),
    (-42, "D4", "-0042"),
    (42, "D", "42"),
    (255, "X", "FF"),
    (255, "x4", "00ff"),
    (-1, "X", "FFFFFFFF"),
    (1234.5, "N", "1,234.50"),
    (1234.5, "N0", "1,235"),
    (-1234567, "N0", "-1,234,567"),
    (3, "F", "3.00"),
    (2.675, "F2", "2.67"),
    (2.25, "F1", "2.3"),
    (-2.25, "F1", "-2.3"),
    (0.1234, "P", "12.34 %"),
    (0.5, "P1", "50.0 %"),
    (1234.567, "C", "¤1,234.57"),
    (-5, "C", "(¤5.00)"),
    (1052.0332, "E", "1.052033E+003"),
    (0.000123, "e2", "1.23e-004"),
    (12345, "G3", "1.23E+04"),
    (1.5, "R", "1.5"),
    (Color.GREEN, "D", "2"),
])
def test_standard_numeric_specifiers(value, spec, expected):
    assert format_scalar(value, spec) == expected


@pytest.mark.parametrize("value, spec, expected", [
    (7, "000", "007"),
    (1234567.891, "#,##0.00", "1,234,567.89"),
    (1.5, "0.##", "1.5"),
    (2, "0.##", "2"),
    (0.5, "#.##", ".5"),
    (0.25, "0%", "25%"),
    (-1.25, "0.0;(0.0)", "(1.3)"),
    (-3, "0.0", "-3.0"),
    (1234567, "#,##0,K", "1,235K"),
])
def test_custom_numeric_patterns(value, spec, expected):
    assert format_scalar(value, spec) == expected


def test_integral_specifier_on_float_raises():
    with pytest.raises(TemplateRenderingError):
        format_scalar(4.5, "D4")


def test_unknown_numeric_specifier_raises():
    with pytest.raises(TemplateRenderingError):
        format_scalar(42, "Z")


# ========== Date and time specifiers ==========

@pytest.mark.parametrize("spec, expected", [
    ("yyyy-MM-dd HH:mm:ss", "2024-01-02 15:04:05"),
    ("hh:mm tt", "03:04 PM"),
    ("dddd, MMMM d", "Tuesday, January 2"),
    ("ddd dd MMM yy", "Tue 02 Jan 24"),
    ("fff", "123"),
    ("FFFFFF", "123456"),
    ("s", "2024-01-02T15:04:05"),
    ("d", "01/02/2024"),
    ("O", "2024-01-02T15:04:05.1234560"),
    ("'Day' d", "Day 2"),
])
def test_datetime_specifiers(spec, expected):
    assert format_scalar(SAMPLE_TIME, spec) == expected


def test_default_datetime_rendering():
    assert format_scalar(SAMPLE_TIME) == "01/02/2024 15:04:05"


def test_trailing_optional_fraction_drops_separator():
    assert format_scalar(datetime(2024, 1, 2, 3, 4, 5), "ss.FFF") == "05"


def test_round_trip_format_with_offsets():
    utc = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    plus_two = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))

    assert format_scalar(utc, "O") == "2024-01-02T03:04:05.0000000Z"
    assert format_scalar(plus_two, "O") == "2024-01-02T03:04:05.0000000+02:00"


def test_universal_format_converts_to_utc():
    local = datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone(timedelta(hours=2)))

    assert format_scalar(local, "u") == "2024-01-02 13:04:05Z"


def test_date_and_time_values():
    assert format_scalar(date(2024, 1, 2), "yyyy/MM/dd") == "2024/01/02"
    assert format_scalar(date(2024, 1, 2)) == "01/02/2024"
    assert format_scalar(time(9, 30)) == "09:30"


def test_unknown_date_specifier_raises():
    with pytest.raises(TemplateRenderingError):
        format_scalar(SAMPLE_TIME, "Q")


# ========== Durations and UUIDs ==========

def test_timedelta_specifiers():
    duration = timedelta(days=1, hours=2, minutes=3, seconds=4, microseconds=500000)

    assert format_scalar(duration) == "1.02:03:04.5000000"
    assert format_scalar(duration, "g") == "1:2:03:04.5"
    assert format_scalar(timedelta(seconds=-90)) == "-00:01:30"


def test_uuid_specifiers():
    value = UUID("12345678-1234-5678-1234-567812345678")

    assert format_scalar(value) == "12345678-1234-5678-1234-567812345678"
    assert format_scalar(value, "N") == "12345678123456781234567812345678"
    assert format_scalar(value, "B") == "{12345678-1234-5678-1234-567812345678}"
