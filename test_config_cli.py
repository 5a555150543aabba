"""
Test Configuration and CLI
==========================

Tests for YAML configuration loading, configure_logging() and the
compactlog-cli commands.

Usage:
    pytest test_config_cli.py
"""

import json
import logging
import uuid

import pytest

from compactlog import CompactLogConfig, configure_logging
from compactlog.config import CaptureConfig, FormatterConfig, LoggingConfig
from compactlog.schemas import LogEventLevel
from compactlog_cli.cli import build_event, main, parse_property


SAMPLE_YAML = """
formatter:
  type_tag_name: "customType"

capture:
  max_depth: 3
  max_string_length: 64
  max_collection_count: 5

logging:
  component: "orders"
  level: "Warning"
  stream: "stderr"
"""


def write_config(tmp_path, text):
    path = tmp_path / "compactlog.yaml"
    path.write_text(text, encoding="utf-8")
    return path


# ========== Configuration ==========

def test_defaults():
    config = CompactLogConfig()

    assert config.formatter.type_tag_name == "$type"
    assert config.capture.max_depth == 10
    assert config.capture.max_string_length is None
    assert config.logging.event_level == LogEventLevel.INFORMATION
    assert config.logging.stream == "stdout"


def test_from_yaml(tmp_path):
    config = CompactLogConfig.from_yaml(write_config(tmp_path, SAMPLE_YAML))

    assert config.formatter.type_tag_name == "customType"
    assert config.build_value_formatter().type_tag_name == "customType"
    assert config.build_formatter().value_formatter.type_tag_name == "customType"
    converter = config.build_converter()
    assert converter.max_depth == 3
    assert converter.max_string_length == 64
    assert converter.max_collection_count == 5
    assert config.logging.component == "orders"
    assert config.logging.event_level == LogEventLevel.WARNING


def test_empty_yaml_gives_defaults(tmp_path):
    assert CompactLogConfig.from_yaml(write_config(tmp_path, "")) == CompactLogConfig()


def test_null_type_tag_disables_tags(tmp_path):
    config = CompactLogConfig.from_yaml(
        write_config(tmp_path, "formatter:\n  type_tag_name: null\n")
    )

    assert config.build_value_formatter().type_tag_name is None


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        CompactLogConfig.from_yaml(tmp_path / "missing.yaml")


@pytest.mark.parametrize("text", [
    "formatter: [unclosed",
    "outputs:\n  a: 1\n",
    "capture:\n  max_depth: 0\n",
    "capture:\n  depth: 3\n",
    "logging:\n  level: Loud\n",
    "logging: 5\n",
    "- a\n- b\n",
])
def test_invalid_yaml_raises_value_error(tmp_path, text):
    with pytest.raises(ValueError):
        CompactLogConfig.from_yaml(write_config(tmp_path, text))


def test_section_validation():
    with pytest.raises(ValueError):
        FormatterConfig(type_tag_name="")
    with pytest.raises(ValueError):
        CaptureConfig(max_collection_count=0)
    with pytest.raises(ValueError):
        LoggingConfig(component="")


def test_configure_logging_writes_to_file(tmp_path):
    log_path = tmp_path / "app.log"
    config = CompactLogConfig(logging=LoggingConfig(level="Debug", stream=str(log_path)))
    target = logging.getLogger(f"configured-{uuid.uuid4().hex[:8]}")

    handler = configure_logging(config, target)
    try:
        target.debug("Shipped {Count} parcels", extra={"properties": {"Count": 3}})
        target.log(5, "Too detailed")
    finally:
        target.removeHandler(handler)
        handler.close()

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    document = json.loads(lines[0])
    assert document["_mt"] == "Shipped {Count} parcels"
    assert document["_l"] == "Debug"
    assert document["Count"] == 3
    assert target.level == logging.DEBUG


# ========== CLI ==========

def test_parse_property_reads_yaml_values():
    assert parse_property("Count=42") == ("Count", 42)
    assert parse_property("Name=Ada") == ("Name", "Ada")
    assert parse_property("Tags=[a, b]") == ("Tags", ["a", "b"])
    assert parse_property("Empty=") == ("Empty", "")

    with pytest.raises(ValueError):
        parse_property("NoEquals")


def test_build_event_from_arguments():
    event = build_event(
        "Failed {Id}",
        level="error",
        properties=["Id=7"],
        exception="disk full",
        trace_id="4bf92f3577b34da6a3ce929d0e0e4736",
    )

    assert event.level == LogEventLevel.ERROR
    assert isinstance(event.exception, RuntimeError)
    assert str(event.exception) == "disk full"
    assert event.trace_id.to_hex() == "4bf92f3577b34da6a3ce929d0e0e4736"
    assert event.span_id is None


def test_render_command(capsys):
    main([
        "render",
        "--template", "Value: {Value:D4}",
        "--property", "Value=42",
        "--level", "Error",
        "--timestamp", "2024-01-02T03:04:05Z",
    ])

    out = capsys.readouterr().out
    assert out == (
        '{"_t":"2024-01-02T03:04:05.0000000Z","_mt":"Value: {Value:D4}",'
        '"_r":["0042"],"_l":"Error","Value":42}\n'
    )


def test_render_command_escapes_at_properties(capsys):
    main([
        "render",
        "--template", "Imported",
        "--property", "@timestamp=2025-01-14",
        "--trace-id", "4bf92f3577b34da6a3ce929d0e0e4736",
        "--span-id", "00f067aa0ba902b7",
    ])

    document = json.loads(capsys.readouterr().out)
    assert document["_timestamp"] == "2025-01-14"
    assert document["_tr"] == "4bf92f3577b34da6a3ce929d0e0e4736"
    assert document["_sp"] == "00f067aa0ba902b7"
    assert "_l" not in document


def test_render_command_with_config(tmp_path, capsys):
    path = write_config(tmp_path, SAMPLE_YAML)

    main([
        "render", "--template", "Point {P}",
        "--property", "P={X: 1}",
        "--config", str(path),
    ])

    document = json.loads(capsys.readouterr().out)
    assert document["P"] == {"X": 1}


def test_render_command_reports_errors(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["render", "--template", "x", "--level", "Loud"])

    assert exc_info.value.code == 1
    assert "Error: Unknown level" in capsys.readouterr().err


def test_check_config_command(tmp_path, capsys):
    path = write_config(tmp_path, SAMPLE_YAML)

    main(["check-config", str(path)])

    out = capsys.readouterr().out
    assert out.startswith(f"Config OK: {path}")
    assert "type_tag_name: customType" in out
    assert "level: Warning" in out


def test_no_command_prints_help_and_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == 1
    assert "compactlog-cli" in capsys.readouterr().out
