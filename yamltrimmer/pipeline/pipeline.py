"""Pipeline orchestration for yamltrimmer."""

import logging
from pathlib import Path
from typing import Optional

from yamltrimmer.config import PipelineSettings, get_settings
from yamltrimmer.errors import OutputError, SourceError
from yamltrimmer.models import Configuration, TrimResult

from .projection import trim
from .source import read_source

logger = logging.getLogger(__name__)

PREVIEW_BYTES = 100


def _log_preview(label: str, content: bytes) -> None:
    """Log the size and the beginning of a document."""
    logger.debug(f"{label}: {len(content)} bytes")
    if len(content) < PREVIEW_BYTES:
        logger.debug(f"{label}: {content.decode('utf-8', errors='replace')}")
    else:
        preview = content[:PREVIEW_BYTES].decode("utf-8", errors="replace")
        logger.debug(f"{label} (first {PREVIEW_BYTES} bytes): {preview}")


def write_output(path: Path, content: bytes) -> None:
    """Write the trimmed document."""
    try:
        path.write_bytes(content)
    except OSError as e:
        raise OutputError(f"Failed to write output file: {e}", path=path) from e
    logger.debug(f"Output file written successfully: {path}")


def run_pipeline(
    configuration: Configuration, settings: Optional[PipelineSettings] = None
) -> TrimResult:
    """
    Run the full trimming pipeline for one configuration.

    Reads the input, trims it with the configured rules and writes the result
    to the configured output file.

    Args:
        configuration: The trimming job
        settings: Pipeline settings (defaults to the global settings)

    Returns:
        Summary of the run

    Raises:
        YamlTrimmerError: If any stage fails; nothing is written in that case
    """
    settings = settings or get_settings()
    destination = Path(configuration.output).expanduser().resolve()
    logger.debug(f"Resolved output file path: {destination}")

    content = read_source(configuration, settings)
    _log_preview("Input data", content)
    if not content:
        raise SourceError("Input data is empty", source=configuration.input)

    trimmed = trim(content, configuration.include, settings.emitter)
    _log_preview("Trimmed data", trimmed)
    if not trimmed:
        raise OutputError("Trimmed data is empty", path=destination)

    write_output(destination, trimmed)
    return TrimResult(
        source=configuration.input,
        destination=destination,
        input_size=len(content),
        output_size=len(trimmed),
    )
