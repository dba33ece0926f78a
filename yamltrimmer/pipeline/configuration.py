"""Loading of run configuration files."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from yamltrimmer.errors import ConfigurationError
from yamltrimmer.models import Configuration

from .rules import parse_rules

logger = logging.getLogger(__name__)


def _load_fields(text: Union[str, bytes], path: Optional[Path]) -> dict[str, Any]:
    """Load the plain configuration fields from YAML text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping", path=path)
    return data


def _format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic validation errors into one line."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def parse_configuration(text: Union[str, bytes], path: Optional[Path] = None) -> Configuration:
    """
    Parse configuration text.

    Args:
        text: YAML configuration
        path: Where the text came from, for error messages

    Returns:
        The validated configuration

    Raises:
        ConfigurationError: If the YAML is invalid or a plain field is missing or malformed
        MalformedRulesError: If the include rules are malformed
    """
    data = _load_fields(text, path)
    rules = parse_rules(text)

    fields = {name: value for name, value in data.items() if name != "include"}
    if fields.get("cache") is None:
        fields.pop("cache", None)

    try:
        return Configuration.model_validate({**fields, "include": rules})
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {_format_validation_error(e)}", path=path
        ) from e


def load_configuration(path: Path) -> Configuration:
    """Read and parse a configuration file."""
    logger.debug(f"Loading configuration file: {path}")
    try:
        text = path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Failed to read configuration file: {e}", path=path) from e

    configuration = parse_configuration(text, path)
    logger.debug(f"Parsed configuration: {configuration!r}")
    return configuration
