"""
Compactlog CLI - Main entry point.

Provides a command-line interface for rendering compact JSON log lines
and validating configuration files.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from compactlog.config import CompactLogConfig
from compactlog.formatting.compact import encode
from compactlog.logging.capture import PropertyValueConverter
from compactlog.schemas import (
    LogEvent,
    LogEventLevel,
    SpanId,
    TraceId,
    parse_utc_timestamp,
)


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary with configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If YAML is invalid
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
        return config or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")


def parse_property(text: str) -> Tuple[str, Any]:
    """
    Parse a NAME=VALUE argument.

    VALUE is read as YAML, so numbers, booleans, null, lists ([1, 2]) and
    mappings ({a: 1}) keep their types; anything else is a string.

    Raises:
        ValueError: If there is no '=' or the name is empty
    """
    name, sep, raw = text.partition("=")
    if not sep or not name:
        raise ValueError(f"Property must be NAME=VALUE, got {text!r}")
    try:
        value = yaml.safe_load(raw) if raw else ""
    except yaml.YAMLError:
        value = raw
    return name, value


def build_event(
    template: str,
    level: str = "Information",
    properties: Optional[List[str]] = None,
    exception: Optional[str] = None,
    trace_id: Optional[str] = None,
    span_id: Optional[str] = None,
    timestamp: Optional[str] = None,
    converter: Optional[PropertyValueConverter] = None
) -> LogEvent:
    """Build a LogEvent from command-line values."""
    converter = converter or PropertyValueConverter()

    captured = [
        converter.create_property(*parse_property(text))
        for text in properties or []
    ]

    return LogEvent.create(
        level=LogEventLevel.from_name(level),
        message_template=template,
        properties=captured,
        exception=RuntimeError(exception) if exception else None,
        timestamp=parse_utc_timestamp(timestamp) if timestamp else None,
        trace_id=TraceId.from_hex(trace_id) if trace_id else None,
        span_id=SpanId.from_hex(span_id) if span_id else None,
    )


def render_command(args: argparse.Namespace) -> str:
    """Execute the render command and return the JSON line."""
    config = CompactLogConfig.from_yaml(args.config) if args.config else CompactLogConfig()

    event = build_event(
        template=args.template,
        level=args.level,
        properties=args.property,
        exception=args.exception,
        trace_id=args.trace_id,
        span_id=args.span_id,
        timestamp=args.timestamp,
        converter=config.build_converter(),
    )
    return encode(event, config.build_value_formatter())


def check_config_command(args: argparse.Namespace) -> str:
    """Execute the check-config command and return a summary."""
    config = CompactLogConfig.from_dict(load_yaml_config(args.config))
    return "\n".join([
        f"Config OK: {args.config}",
        f"  type_tag_name: {config.formatter.type_tag_name}",
        f"  max_depth: {config.capture.max_depth}",
        f"  max_string_length: {config.capture.max_string_length}",
        f"  max_collection_count: {config.capture.max_collection_count}",
        f"  component: {config.logging.component}",
        f"  level: {config.logging.event_level.display_name}",
        f"  stream: {config.logging.stream}",
    ])


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="compactlog-cli",
        description="Compactlog CLI - Render compact JSON log lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render an event with a formatted property
  compactlog-cli render --template "Value: {Value:D4}" --property Value=42 --level Error

  # Rename '@'-prefixed properties
  compactlog-cli render --template "Imported" --property @timestamp=2025-01-14

  # Attach trace context
  compactlog-cli render --template "Handled" \\
      --trace-id 4bf92f3577b34da6a3ce929d0e0e4736 --span-id 00f067aa0ba902b7

  # Validate a configuration file
  compactlog-cli check-config config/compactlog.yaml
"""
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # render command
    render = subparsers.add_parser('render', help='Render one event as a compact JSON line')
    render.add_argument('--template', required=True, help='Message template text')
    render.add_argument('--level', default='Information',
                        help='Level name (default: Information)')
    render.add_argument('--property', action='append', default=[], metavar='NAME=VALUE',
                        help='Event property; VALUE is parsed as YAML (repeatable)')
    render.add_argument('--exception', help='Attach an exception with this message')
    render.add_argument('--trace-id', help='Trace id (32 hex digits)')
    render.add_argument('--span-id', help='Span id (16 hex digits)')
    render.add_argument('--timestamp', help='ISO 8601 timestamp (default: now)')
    render.add_argument('--config', help='Path to compactlog YAML config')

    # check-config command
    check_config = subparsers.add_parser('check-config', help='Validate a YAML config')
    check_config.add_argument('config', help='Path to compactlog YAML config')

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()

    # Parse arguments
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Execute command
    try:
        if args.command == 'render':
            print(render_command(args))

        elif args.command == 'check-config':
            print(check_config_command(args))

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
