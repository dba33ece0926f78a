"""Models for pipeline results."""

from pathlib import Path

from pydantic import BaseModel, Field


class TrimResult(BaseModel):
    """Outcome of a pipeline run."""

    source: str = Field(description="Input locator the document was read from")
    destination: Path = Field(description="Absolute path the trimmed document was written to")
    input_size: int = Field(ge=0, description="Size of the input document in bytes")
    output_size: int = Field(ge=0, description="Size of the trimmed document in bytes")

    @property
    def removed_bytes(self) -> int:
        """Number of bytes trimmed away."""
        return self.input_size - self.output_size

    def __str__(self) -> str:
        return f"{self.source} -> {self.destination} ({self.input_size} -> {self.output_size} bytes)"
