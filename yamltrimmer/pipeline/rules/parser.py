"""Parser for include rule definitions."""

import logging
from collections import Counter
from typing import Optional, Union

import yaml  # type: ignore[import-untyped]

from yamltrimmer.errors import MalformedRulesError

from ..document import NodeKind, describe_yaml_error, node_kind, node_position
from .models import IncludeRule, walk_rules

logger = logging.getLogger(__name__)

RULE_FIELDS = {"key", "include"}


def _rule_error(message: str, rule_path: Optional[str], node: yaml.Node) -> MalformedRulesError:
    """Build a MalformedRulesError pointing at a node."""
    line, column = node_position(node)
    return MalformedRulesError(message, rule_path=rule_path, line=line, column=column)


def _compose_rules(text: Union[str, bytes]) -> Optional[yaml.Node]:
    """Compose rule text into a node tree."""
    try:
        return yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as e:
        message, line, column = describe_yaml_error(e)
        raise MalformedRulesError(f"Invalid YAML: {message}", line=line, column=column) from e


def _fields(node: yaml.MappingNode) -> dict[str, yaml.Node]:
    """Get a mapping node's values keyed by scalar key text (first occurrence wins)."""
    fields: dict[str, yaml.Node] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value not in fields:
            fields[key_node.value] = value_node
    return fields


def _parse_key(fields: dict[str, yaml.Node], rule_path: str, node: yaml.Node) -> str:
    """Read the raw scalar text of a rule's 'key' field."""
    if "key" not in fields:
        raise _rule_error("Rule missing required 'key' field", rule_path, node)

    key_node = fields["key"]
    kind = node_kind(key_node)
    if kind is NodeKind.NULL:
        raise _rule_error("Rule 'key' field must not be empty", rule_path, key_node)
    if kind is not NodeKind.SCALAR:
        raise _rule_error(f"Rule 'key' field must be a scalar, got a {kind.value}", rule_path, key_node)
    return key_node.value


def _parse_rule(node: yaml.Node, rule_path: str) -> IncludeRule:
    """Parse a single rule entry."""
    kind = node_kind(node)
    if kind is not NodeKind.MAPPING:
        raise _rule_error(f"Rule must be a mapping with a 'key' field, got a {kind.value}", rule_path, node)

    fields = _fields(node)
    key = _parse_key(fields, rule_path, node)

    unknown = sorted(set(fields) - RULE_FIELDS)
    if unknown:
        logger.warning(f"Ignoring unknown field(s) {', '.join(unknown)} in rule {rule_path} ('{key}')")

    children: tuple[IncludeRule, ...] = ()
    if "include" in fields:
        children = _parse_rule_list(fields["include"], f"{rule_path}.include")

    return IncludeRule(key=key, include=children)


def _warn_duplicate_keys(rules: tuple[IncludeRule, ...], rule_path: str) -> None:
    """Log sibling rules that select the same key."""
    counts = Counter(rule.key for rule in rules)
    for key, count in counts.items():
        if count > 1:
            logger.warning(f"Key '{key}' is selected {count} times in {rule_path}")


def _parse_rule_list(node: yaml.Node, rule_path: str) -> tuple[IncludeRule, ...]:
    """Parse an 'include' value into a rule forest."""
    kind = node_kind(node)
    if kind is NodeKind.NULL:
        return ()
    if kind is not NodeKind.SEQUENCE:
        raise _rule_error(f"'include' must be a list of rules, got a {kind.value}", rule_path, node)

    rules = tuple(
        _parse_rule(item, f"{rule_path}[{index}]") for index, item in enumerate(node.value)
    )
    _warn_duplicate_keys(rules, rule_path)
    return rules


def parse_rules(text: Union[str, bytes]) -> tuple[IncludeRule, ...]:
    """
    Parse rule-definition text into a rule forest.

    The text is a YAML mapping with a top-level ``include`` list. Each entry
    has a required ``key`` and an optional nested ``include`` list. Other
    top-level fields (``input``, ``output``, ``cache``) are ignored here.

    Args:
        text: YAML rule definitions

    Returns:
        The top-level rules in declaration order

    Raises:
        MalformedRulesError: If the text is not valid YAML or the rules are malformed
    """
    root = _compose_rules(text)
    if root is None:
        raise MalformedRulesError("Rules document is empty")

    if node_kind(root) is not NodeKind.MAPPING:
        raise _rule_error("Rules document must be a mapping", None, root)

    fields = _fields(root)
    if "include" not in fields:
        raise _rule_error("Rules document missing required 'include' field", None, root)

    rules = _parse_rule_list(fields["include"], "include")
    logger.debug(f"Parsed {sum(1 for _ in walk_rules(rules))} rule(s)")
    return rules
