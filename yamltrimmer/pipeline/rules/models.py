"""Data models for the rules system."""

from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field


class IncludeRule(BaseModel):
    """A single inclusion directive.

    Selects the mapping entry whose key text equals ``key``. When ``include``
    is empty the entry's whole value is kept; otherwise the value must be a
    mapping and is trimmed with the nested rules.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Mapping key to keep, matched against the key's scalar text")
    include: tuple["IncludeRule", ...] = Field(
        default=(), description="Nested rules applied to the key's value"
    )

    @property
    def is_leaf(self) -> bool:
        """True if the rule keeps the matched value verbatim."""
        return not self.include

    def walk(self, depth: int = 0) -> Iterator[tuple[int, "IncludeRule"]]:
        """Yield (depth, rule) pairs for this rule and its descendants, depth first."""
        yield depth, self
        for child in self.include:
            yield from child.walk(depth + 1)

    def __str__(self) -> str:
        if self.is_leaf:
            return self.key
        return f"{self.key}{{{', '.join(str(child) for child in self.include)}}}"


def walk_rules(rules: tuple[IncludeRule, ...]) -> Iterator[tuple[int, IncludeRule]]:
    """Yield (depth, rule) pairs for an entire rule forest."""
    for rule in rules:
        yield from rule.walk()
