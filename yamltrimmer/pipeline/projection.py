"""Projection of a YAML node tree onto a rule forest."""

import copy
import logging
from typing import Optional, Sequence, Union

import yaml  # type: ignore[import-untyped]

from yamltrimmer.config import EmitterSettings, get_settings
from yamltrimmer.errors import NotAMappingError

from .document import (
    NodeKind,
    new_mapping,
    node_kind,
    node_position,
    parse_document,
    serialize_document,
)
from .rules import IncludeRule

logger = logging.getLogger(__name__)

ROOT_PATH = "<root>"


def _find_entry(
    mapping: yaml.MappingNode, key: str
) -> Optional[tuple[yaml.Node, yaml.Node]]:
    """Find the first (key, value) pair whose key text equals ``key``."""
    for key_node, value_node in mapping.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            return key_node, value_node
    return None


def _child_path(path: str, key: str) -> str:
    if path == ROOT_PATH:
        return key
    return f"{path}.{key}"


def project(
    rules: Sequence[IncludeRule], node: yaml.Node, path: str = ROOT_PATH
) -> yaml.MappingNode:
    """
    Build a mapping that holds only the entries of ``node`` selected by ``rules``.

    Entries appear in rule order. Rules whose key is absent are skipped. A
    leaf rule keeps the matched value node as-is; a rule with nested rules is
    projected recursively onto the matched value. The input tree is never
    modified; the result may share subtrees with it. A key selected again by a
    later sibling rule is appended as a copy.

    Args:
        rules: Rule forest to apply
        node: Mapping node to project
        path: Dotted key path of ``node``, used in error messages

    Returns:
        A new mapping node carrying the input mapping's style hint

    Raises:
        NotAMappingError: If ``node``, or the value of any rule with nested
            rules, is not a mapping
    """
    kind = node_kind(node)
    if kind is not NodeKind.MAPPING:
        line, column = node_position(node)
        raise NotAMappingError(path, kind.value, line=line, column=column)

    output = new_mapping(flow_style=node.flow_style)
    emitted: set[str] = set()

    for rule in rules:
        entry = _find_entry(node, rule.key)
        if entry is None:
            logger.debug(f"No key '{rule.key}' under {path}, skipping")
            continue

        key_node, value_node = entry
        if not rule.is_leaf:
            value_node = project(rule.include, value_node, _child_path(path, rule.key))

        # Repeated keys get their own nodes so they are not emitted as aliases
        if rule.key in emitted:
            key_node, value_node = copy.deepcopy((key_node, value_node))
        emitted.add(rule.key)
        output.value.append((key_node, value_node))

    return output


def trim(
    content: Union[str, bytes],
    rules: Sequence[IncludeRule],
    settings: Optional[EmitterSettings] = None,
) -> bytes:
    """
    Trim a YAML document down to the keys selected by ``rules``.

    Args:
        content: YAML text holding a single document
        rules: Rule forest to apply
        settings: Serialization settings (defaults to the global emitter settings)

    Returns:
        The trimmed document as UTF-8 YAML

    Raises:
        InvalidDocumentError: If the content is not valid YAML
        EmptyDocumentError: If the content holds no document
        UnsupportedMultiDocumentError: If the content holds more than one document
        NotAMappingError: If the document shape does not fit the rules
    """
    root = parse_document(content)

    trimmed = project(rules, root)
    logger.debug(f"Trimmed input YAML: kept {len(trimmed.value)} top-level key(s)")

    output = serialize_document(trimmed, settings or get_settings().emitter)
    logger.debug(f"Serialized output YAML: {len(output)} bytes")
    return output
