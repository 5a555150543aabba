"""
Test JSON Value Formatter
=========================

This script checks how property values are written as JSON: scalar
literals, sequences, structures with type tags and dictionaries.

Usage:
    source .venv/bin/activate && python test_json_value.py
"""

import json
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from uuid import UUID

import pytest

from compactlog import (
    DictionaryValue,
    JsonValueFormatter,
    LogEventProperty,
    ScalarValue,
    SequenceValue,
    StructureValue,
)
from compactlog.errors import ValueRenderingError


class Status(Enum):
    ACTIVE = "active"


def point(type_tag="Point"):
    return StructureValue(
        (LogEventProperty("X", ScalarValue(1)), LogEventProperty("Y", ScalarValue(2))),
        type_tag=type_tag,
    )


def test_scalar_literals():
    """Scalars become JSON literals."""
    print("\n" + "=" * 60)
    print("TEST: Scalar Literals")
    print("=" * 60)

    formatter = JsonValueFormatter()
    cases = [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (-7, "-7"),
        (1.5, "1.5"),
        (Decimal("1.10"), "1.10"),
        ("a\"b\\c", '"a\\"b\\\\c"'),
        ("café", '"café"'),
        ("\x01", '"\\u0001"'),
        (Status.ACTIVE, '"ACTIVE"'),
        (datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc), '"2024-01-02T03:04:05.0000000Z"'),
        (date(2024, 1, 2), '"2024-01-02"'),
        (timedelta(minutes=1), '"00:01:00"'),
        (UUID("12345678-1234-5678-1234-567812345678"), '"12345678-1234-5678-1234-567812345678"'),
        (b"\x00\xff", '"00ff"'),
    ]

    for value, expected in cases:
        assert formatter.format_to_string(ScalarValue(value)) == expected
        print(f"✓ {value!r} -> {expected}")


def test_non_finite_floats_are_strings():
    """NaN and infinities are not valid JSON numbers."""
    formatter = JsonValueFormatter()

    assert formatter.format_to_string(ScalarValue(float("nan"))) == '"NaN"'
    assert formatter.format_to_string(ScalarValue(float("inf"))) == '"Infinity"'
    assert formatter.format_to_string(ScalarValue(float("-inf"))) == '"-Infinity"'
    assert formatter.format_to_string(ScalarValue(Decimal("NaN"))) == '"NaN"'
    print("✓ Non-finite numbers quoted")


def test_sequence():
    formatter = JsonValueFormatter()

    text = formatter.format_to_string(SequenceValue(
        [ScalarValue(1), ScalarValue("a"), ScalarValue(None), SequenceValue()]
    ))

    assert text == '[1,"a",null,[]]'
    print(f"✓ Sequence: {text}")


def test_structure_type_tag():
    """The type tag is written last, under the configured key."""
    print("\n" + "=" * 60)
    print("TEST: Structure Type Tags")
    print("=" * 60)

    assert JsonValueFormatter().format_to_string(point()) == '{"X":1,"Y":2,"$type":"Point"}'
    print("✓ Default type tag key")

    custom = JsonValueFormatter(type_tag_name="customType").format_to_string(point())
    assert custom == '{"X":1,"Y":2,"customType":"Point"}'
    print("✓ Custom type tag key")

    assert JsonValueFormatter(type_tag_name=None).format_to_string(point()) == '{"X":1,"Y":2}'
    print("✓ Type tags disabled")

    assert JsonValueFormatter().format_to_string(point(type_tag=None)) == '{"X":1,"Y":2}'
    assert JsonValueFormatter().format_to_string(StructureValue(type_tag="Empty")) == (
        '{"$type":"Empty"}'
    )
    print("✓ Untagged and empty structures")


def test_dictionary_keys_are_strings():
    formatter = JsonValueFormatter()

    text = formatter.format_to_string(DictionaryValue([
        (ScalarValue("a"), ScalarValue(1)),
        (ScalarValue(2), ScalarValue(True)),
        (ScalarValue(None), point()),
    ]))

    assert text == '{"a":1,"2":true,"null":{"X":1,"Y":2,"$type":"Point"}}'
    assert json.loads(text)["2"] is True
    print(f"✓ Dictionary: {text}")


def test_unsupported_value_raises():
    with pytest.raises(ValueRenderingError):
        JsonValueFormatter().format_to_string([1, 2])

    with pytest.raises(TypeError):
        JsonValueFormatter().format_to_string(object())
    print("✓ Unsupported values rejected")


def main():
    """Run all tests."""
    print("\n🧾 compactlog - JSON Value Formatter Tests")
    print("=" * 60)

    try:
        test_scalar_literals()
        test_non_finite_floats_are_strings()
        test_sequence()
        test_structure_type_tag()
        test_dictionary_keys_are_strings()
        test_unsupported_value_raises()

        print("\n" + "=" * 60)
        print("✅ ALL TESTS PASSED!")
        print("=" * 60)

    except AssertionError as e:
        print(f"\n❌ TEST FAILED: {e}")
        raise
    except Exception as e:
        print(f"\n❌ ERROR: {e}")
        raise


if __name__ == "__main__":
    main()
