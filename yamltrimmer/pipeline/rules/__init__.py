"""Include rules: which keys of a document to keep."""

from .models import IncludeRule, walk_rules
from .parser import parse_rules

__all__ = [
    "IncludeRule",
    "parse_rules",
    "walk_rules",
]
