"""Exceptions raised by yamltrimmer."""

from pathlib import Path
from typing import Optional


def _format_position(line: Optional[int], column: Optional[int]) -> str:
    """Format a 1-based position suffix for error messages."""
    if line is None:
        return ""
    if column is None:
        return f" (line {line})"
    return f" (line {line}, column {column})"


class YamlTrimmerError(Exception):
    """Base class for all yamltrimmer errors."""

    pass


class MalformedRulesError(YamlTrimmerError):
    """Raised when rule-definition text cannot be decoded into a rule forest."""

    def __init__(
        self,
        message: str,
        rule_path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.rule_path = rule_path
        self.line = line
        self.column = column
        location = f"{rule_path}: " if rule_path else ""
        super().__init__(f"{location}{message}{_format_position(line, column)}")


class NotAMappingError(YamlTrimmerError):
    """Raised when nested rules are applied to a value that is not a mapping."""

    def __init__(
        self,
        key_path: str,
        kind: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.key_path = key_path
        self.kind = kind
        self.line = line
        self.column = column
        super().__init__(
            f"Value at '{key_path}' is a {kind}, not a mapping{_format_position(line, column)}"
        )


class EmptyDocumentError(YamlTrimmerError):
    """Raised when the input contains no YAML document."""

    def __init__(self, message: str = "No content in the input YAML"):
        super().__init__(message)


class UnsupportedMultiDocumentError(YamlTrimmerError):
    """Raised when the input contains more than one YAML document."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Input YAML contains {count} documents; only a single document is supported"
        )


class InvalidDocumentError(YamlTrimmerError):
    """Raised when the input is not valid YAML."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        super().__init__(f"Failed to parse input YAML: {message}{_format_position(line, column)}")


class ConfigurationError(YamlTrimmerError):
    """Raised when the configuration file cannot be read or is invalid."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        prefix = f"{path}: " if path else ""
        super().__init__(f"{prefix}{message}")


class SourceError(YamlTrimmerError):
    """Raised when the input document cannot be obtained."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


class OutputError(YamlTrimmerError):
    """Raised when the trimmed document cannot be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)
