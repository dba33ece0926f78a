"""Parse and serialize YAML documents as node trees.

The node trees are PyYAML representation nodes. They keep each node's style
hint (``flow_style`` on collections, ``style`` on scalars), the source
position and the anchor name, which is all the projection needs; values are
never constructed into Python objects.

Serialization is not byte-exact: comments are dropped, and scalars with an
explicit core tag (``!!str 1``) are written with the style that implies the
tag (``'1'``).
"""

import logging
from enum import Enum
from typing import Optional, Union

import yaml  # type: ignore[import-untyped]

from yamltrimmer.config import EmitterSettings
from yamltrimmer.errors import (
    EmptyDocumentError,
    InvalidDocumentError,
    UnsupportedMultiDocumentError,
)

logger = logging.getLogger(__name__)

MAPPING_TAG = "tag:yaml.org,2002:map"
NULL_TAG = "tag:yaml.org,2002:null"


class NodeKind(Enum):
    """Structural kind of a document node."""

    MAPPING = "mapping"
    SEQUENCE = "sequence"
    SCALAR = "scalar"
    NULL = "null"


def node_kind(node: yaml.Node) -> NodeKind:
    """Return the structural kind of a node."""
    if isinstance(node, yaml.MappingNode):
        return NodeKind.MAPPING
    if isinstance(node, yaml.SequenceNode):
        return NodeKind.SEQUENCE
    if node.tag == NULL_TAG:
        return NodeKind.NULL
    return NodeKind.SCALAR


def mark_position(mark: Optional[yaml.Mark]) -> tuple[Optional[int], Optional[int]]:
    """Convert a PyYAML mark into a 1-based (line, column) pair."""
    if mark is None:
        return None, None
    return mark.line + 1, mark.column + 1


def node_position(node: yaml.Node) -> tuple[Optional[int], Optional[int]]:
    """Get the 1-based (line, column) where a node starts, if known."""
    return mark_position(getattr(node, "start_mark", None))


def describe_yaml_error(error: yaml.YAMLError) -> tuple[str, Optional[int], Optional[int]]:
    """Summarize a PyYAML error as (message, line, column)."""
    if isinstance(error, yaml.MarkedYAMLError):
        parts = [part for part in (error.context, error.problem) if part]
        message = ", ".join(parts) if parts else str(error)
        line, column = mark_position(error.problem_mark or error.context_mark)
        return message, line, column
    return str(error), None, None


class DocumentLoader(yaml.SafeLoader):
    """Composer that records each node's anchor name on the node."""

    def compose_node(self, parent, index):
        event = self.peek_event()
        node = super().compose_node(parent, index)
        if not isinstance(event, yaml.AliasEvent) and event.anchor is not None:
            node.anchor = event.anchor
        return node


class DocumentDumper(yaml.SafeDumper):
    """Emitter that indents block sequences under their key and reuses recorded anchor names."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)

    def generate_anchor(self, node):
        anchor = getattr(node, "anchor", None)
        if anchor and anchor not in self.anchors.values():
            return anchor
        return super().generate_anchor(node)


def new_mapping(flow_style: Optional[bool] = None) -> yaml.MappingNode:
    """Create an empty mapping node with the given style hint."""
    return yaml.MappingNode(tag=MAPPING_TAG, value=[], flow_style=flow_style)


def parse_document(content: Union[str, bytes]) -> yaml.Node:
    """
    Parse YAML text into the node tree of its single document.

    Args:
        content: YAML text, as bytes or str

    Returns:
        The top-level node of the document

    Raises:
        InvalidDocumentError: If the content is not valid YAML
        EmptyDocumentError: If the content holds no document
        UnsupportedMultiDocumentError: If the content holds more than one document
    """
    try:
        documents = list(yaml.compose_all(content, Loader=DocumentLoader))
    except yaml.YAMLError as e:
        message, line, column = describe_yaml_error(e)
        raise InvalidDocumentError(message, line=line, column=column) from e

    logger.debug(f"Parsed input YAML: {len(documents)} document(s)")

    if not documents:
        raise EmptyDocumentError()

    if len(documents) > 1:
        raise UnsupportedMultiDocumentError(len(documents))

    return documents[0]


def serialize_document(node: yaml.Node, settings: Optional[EmitterSettings] = None) -> bytes:
    """Serialize a node tree back to UTF-8 YAML, honouring each node's style hint."""
    settings = settings or EmitterSettings()
    return yaml.serialize(
        node,
        Dumper=DocumentDumper,
        indent=settings.indent,
        width=settings.line_width or float("inf"),
        allow_unicode=settings.allow_unicode,
        encoding="utf-8",
    )
