"""Template document model.

A template is an ordered list of nodes. Every node is exactly one of:

- ``DynamicNode``: a fill-in slot (``dynamicText``, ``dynamicUpload``, ...).
- ``ContainerNode``: any other node whose ``content`` is a list of nodes.
- ``LeafNode``: anything else, passed through untouched.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from .placeholder import DYNAMIC_TYPES, is_dynamic


@dataclass(frozen=True)
class DynamicNode:
    """Slot-bearing leaf. ``content`` is the node's property dict."""
    type: str
    name: str | None
    content: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)  # id, styles, ... kept as-is

    @property
    def placeholder_type(self) -> str:
        return DYNAMIC_TYPES[self.type]


@dataclass(frozen=True)
class ContainerNode:
    """Node owning an ordered list of child nodes."""
    type: str
    content: tuple[TemplateNode, ...] = ()
    name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LeafNode:
    """Node with no slots and no children."""
    type: str | None
    content: Any = None
    name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


TemplateNode = Union[DynamicNode, ContainerNode, LeafNode]

_RESERVED_KEYS = ("type", "name", "content")


def node_from_dict(data: dict[str, Any]) -> TemplateNode:
    """Build a typed node (recursively) from its JSON dict."""
    if not isinstance(data, dict):
        raise TypeError(f"Template node must be an object, got {type(data).__name__}")

    node_type = data.get("type")
    name = data.get("name")
    content = data.get("content")
    extra = {k: v for k, v in data.items() if k not in _RESERVED_KEYS}

    if is_dynamic(node_type):
        return DynamicNode(
            type=node_type,
            name=name,
            content=dict(content) if isinstance(content, dict) else {},
            extra=extra,
        )
    if isinstance(content, list):
        return ContainerNode(
            type=node_type,
            content=tuple(node_from_dict(child) for child in content),
            name=name,
            extra=extra,
        )
    return LeafNode(type=node_type, content=content, name=name, extra=extra)


def node_to_dict(node: TemplateNode) -> dict[str, Any]:
    """Inverse of node_from_dict."""
    if isinstance(node, ContainerNode):
        content: Any = [node_to_dict(child) for child in node.content]
    elif isinstance(node, (DynamicNode, LeafNode)):
        content = node.content
    else:
        raise TypeError(f"Not a template node: {node!r}")

    data: dict[str, Any] = dict(node.extra)
    data["type"] = node.type
    if node.name is not None:
        data["name"] = node.name
    if content is not None:
        data["content"] = content
    return data


def nodes_to_json(nodes: list[TemplateNode]) -> str:
    """Serialize a node list the way task records store it."""
    return json.dumps([node_to_dict(n) for n in nodes])


@dataclass
class Template:
    """A loaded task template. Immutable for the session once parsed."""
    id: str
    name: str
    nodes: list[TemplateNode]
    timer: int = 0


@dataclass
class Project:
    """Project the generated tasks belong to."""
    id: str
    name: str
