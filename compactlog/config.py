"""
Configuration schema for compactlog.

This module defines the configuration structure for the encoder and the
logging bridge: the value formatter's type tag, capture limits, and where
and at what level log lines are written.
"""

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

from .formatting.compact import CompactJsonFormatter
from .formatting.json_value import JsonValueFormatter, DEFAULT_TYPE_TAG_NAME
from .logging.capture import PropertyValueConverter, DEFAULT_MAX_DEPTH
from .logging.formatter import CompactJsonLogFormatter
from .schemas.levels import LogEventLevel


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormatterConfig:
    """Value formatter configuration."""

    type_tag_name: Optional[str] = DEFAULT_TYPE_TAG_NAME  # None disables type tags

    def __post_init__(self):
        """Validate formatter configuration."""
        if self.type_tag_name is not None:
            if not isinstance(self.type_tag_name, str) or not self.type_tag_name:
                raise ValueError(
                    f"type_tag_name must be a non-empty string or null, "
                    f"got {self.type_tag_name!r}"
                )


@dataclass(frozen=True)
class CaptureConfig:
    """Limits applied when capturing property values."""

    max_depth: int = DEFAULT_MAX_DEPTH
    max_string_length: Optional[int] = None
    max_collection_count: Optional[int] = None

    def __post_init__(self):
        """Validate capture limits."""
        if not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth!r}")

        if self.max_string_length is not None and self.max_string_length < 2:
            raise ValueError(
                f"max_string_length must be >= 2 or null, got {self.max_string_length}"
            )

        if self.max_collection_count is not None and self.max_collection_count < 1:
            raise ValueError(
                f"max_collection_count must be >= 1 or null, got {self.max_collection_count}"
            )


@dataclass(frozen=True)
class LoggingConfig:
    """Where and at what level compact lines are written."""

    component: str = "app"
    level: str = "Information"
    stream: str = "stdout"  # "stdout", "stderr" or a file path

    def __post_init__(self):
        """Validate logging configuration."""
        if not self.component:
            raise ValueError("component cannot be empty")

        # Raises ValueError for unknown names
        LogEventLevel.from_name(self.level)

        if not self.stream:
            raise ValueError("stream cannot be empty")

    @property
    def event_level(self) -> LogEventLevel:
        """Configured minimum level."""
        return LogEventLevel.from_name(self.level)


@dataclass(frozen=True)
class CompactLogConfig:
    """
    Main configuration for compactlog.

    This configuration is loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def build_value_formatter(self) -> JsonValueFormatter:
        """Value formatter with the configured type tag."""
        return JsonValueFormatter(type_tag_name=self.formatter.type_tag_name)

    def build_formatter(self) -> CompactJsonFormatter:
        """Event formatter using build_value_formatter()."""
        return CompactJsonFormatter(self.build_value_formatter())

    def build_converter(self) -> PropertyValueConverter:
        """Property value converter with the configured limits."""
        return PropertyValueConverter(
            max_depth=self.capture.max_depth,
            max_string_length=self.capture.max_string_length,
            max_collection_count=self.capture.max_collection_count,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CompactLogConfig":
        """
        Build configuration from a parsed YAML mapping.

        Raises:
            ValueError: If a section is not a mapping, has unknown keys or
                holds invalid values
        """
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

        unknown = set(data) - {"formatter", "capture", "logging"}
        if unknown:
            raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

        def _section(name: str, section_cls):
            section = data.get(name) or {}
            if not isinstance(section, dict):
                raise ValueError(f"Section '{name}' must be a mapping")
            try:
                return section_cls(**section)
            except TypeError as e:
                raise ValueError(f"Invalid keys in section '{name}': {e}") from e

        return cls(
            formatter=_section("formatter", FormatterConfig),
            capture=_section("capture", CaptureConfig),
            logging=_section("logging", LoggingConfig),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "CompactLogConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            formatter:
              type_tag_name: "$type"

            capture:
              max_depth: 10
              max_string_length: 4096
              max_collection_count: 100

            logging:
              component: "orders"
              level: "Information"
              stream: "stdout"

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the YAML or its values are invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        config = cls.from_dict(data)
        logger.debug("Loaded compactlog configuration from %s", path)
        return config


def configure_logging(
    config: Optional[CompactLogConfig] = None,
    target: Optional[logging.Logger] = None
) -> logging.Handler:
    """
    Install a compact JSON handler.

    Args:
        config: Configuration (default: CompactLogConfig())
        target: Logger to configure (default: root logger)

    Returns:
        The installed handler (remove it with target.removeHandler)
    """
    config = config or CompactLogConfig()
    target = target or logging.getLogger()

    stream_name = config.logging.stream
    if stream_name == "stdout":
        handler: logging.Handler = logging.StreamHandler(sys.stdout)
    elif stream_name == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.FileHandler(stream_name, encoding="utf-8")

    handler.setFormatter(
        CompactJsonLogFormatter(config.build_value_formatter(), config.build_converter())
    )
    target.setLevel(config.logging.event_level.to_logging_level())
    target.addHandler(handler)
    return handler
