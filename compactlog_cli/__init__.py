"""
Compactlog CLI - Command-line interface for compact JSON log lines.

This package provides a CLI for rendering single events as compact JSON
and validating compactlog configuration files.

Usage:
    compactlog-cli render --template "Value: {Value:D4}" --property Value=42
    compactlog-cli render --template "Imported" --property @timestamp=2025-01-14
    compactlog-cli check-config config/compactlog.yaml
"""

__version__ = "1.0.0"
