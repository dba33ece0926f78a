"""Trim YAML documents down to a configured set of keys."""

__version__ = "0.1.0"
