"""Parse template documents and extract their placeholders."""

import json
import logging
from typing import Any

from ..models.placeholder import Placeholder
from ..models.template import (
    ContainerNode,
    DynamicNode,
    LeafNode,
    Template,
    TemplateNode,
    node_from_dict,
)

logger = logging.getLogger(__name__)


class TemplateParseError(Exception):
    """Template is malformed or ambiguous."""
    def __init__(self, message: str, raw: Any = None):
        self.raw = raw
        super().__init__(message)


def parse_nodes(raw: str | bytes | list[dict[str, Any]]) -> list[TemplateNode]:
    """Decode a template document (JSON text or already-decoded list)."""
    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TemplateParseError(f"Template is not valid JSON: {e}", raw=raw) from e

    if not isinstance(data, list):
        raise TemplateParseError("Template root must be a list of nodes", raw=raw)

    try:
        return [node_from_dict(item) for item in data]
    except TypeError as e:
        raise TemplateParseError(str(e), raw=raw) from e


def extract_placeholders(root: list[TemplateNode]) -> list[Placeholder]:
    """
    Walk the tree pre-order and list its slots in discovery order.

    Dynamic nodes are not descended into. Raises TemplateParseError for a
    slot without a name or with a name already used; nothing is returned
    in that case.
    """
    placeholders: list[Placeholder] = []
    seen: set[str] = set()

    def visit(node: TemplateNode) -> None:
        if isinstance(node, DynamicNode):
            if not node.name:
                raise TemplateParseError(f"{node.type} node #{len(placeholders)} has no name")
            if node.name in seen:
                raise TemplateParseError(f"Duplicate placeholder name: {node.name!r}")
            seen.add(node.name)
            placeholders.append(Placeholder(
                type=node.placeholder_type,
                index=len(placeholders),
                name=node.name,
            ))
        elif isinstance(node, ContainerNode):
            for child in node.content:
                visit(child)
        elif isinstance(node, LeafNode):
            return
        else:
            raise TypeError(f"Not a template node: {node!r}")

    for node in root:
        visit(node)
    return placeholders


def load_template(record: dict[str, Any]) -> tuple[Template, list[Placeholder]]:
    """
    Build a Template from a stored template record and extract its slots.

    The record's ``content`` holds the node list, usually as a JSON string.
    """
    if "content" not in record:
        raise TemplateParseError("Template record has no content", raw=record)

    nodes = parse_nodes(record["content"])
    placeholders = extract_placeholders(nodes)
    template = Template(
        id=str(record.get("id") or record.get("_id") or ""),
        name=record.get("name", ""),
        nodes=nodes,
        timer=int(record.get("timer") or 0),
    )
    logger.info("Loaded template %r with %d placeholders", template.name, len(placeholders))
    return template, placeholders
