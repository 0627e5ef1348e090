"""Fill template slots with draft task values.

Each dynamic node type has a substitution rule registered below. Filling never
mutates the input tree; it returns a new one that shares no nested state with it.
"""

import copy
import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from typing import Callable, Optional, Union

from ..models.placeholder import DYNAMIC_TYPES, Placeholder, token_for
from ..models.task import DEFAULT_FILE_TYPE, CarouselContent, SlotValue, TaskValue
from ..models.template import ContainerNode, DynamicNode, LeafNode, TemplateNode

logger = logging.getLogger(__name__)

Rule = Callable[[DynamicNode, Optional[SlotValue], str], DynamicNode]

_RULES: dict[str, Rule] = {}

AUDIO_DEFAULTS = {
    "transcribeEnabled": False,
    "transcriptionModel": "default",
    "apiKey": "",
    "language": "en",
    "transcription": "",
}

Values = Union[Sequence[Optional[SlotValue]], Mapping[int, SlotValue]]


def register(*node_types: str):
    """Decorator to register a substitution rule for dynamic node types."""
    def decorator(func: Rule) -> Rule:
        for node_type in node_types:
            _RULES[node_type] = func
        return func
    return decorator


def get_rule(node_type: str) -> Rule:
    if node_type not in _RULES:
        raise ValueError(f"No fill rule for node type: {node_type}")
    return _RULES[node_type]


def _scalar(value: SlotValue | None, token: str) -> str:
    """Text of a scalar value, or the token when missing/empty."""
    if isinstance(value, TaskValue) and value.content:
        return value.content
    if isinstance(value, CarouselContent):
        logger.warning("Carousel value supplied for a scalar slot; leaving %s", token)
    return token


@register("dynamicText")
def fill_text(node: DynamicNode, value: SlotValue | None, token: str) -> DynamicNode:
    return replace(node, content={**node.content, "innerText": _scalar(value, token)})


@register("dynamicVideo", "dynamicImage", "dynamicImageAnnotation")
def fill_src(node: DynamicNode, value: SlotValue | None, token: str) -> DynamicNode:
    return replace(node, content={**node.content, "src": _scalar(value, token)})


@register("dynamicAudio")
def fill_audio(node: DynamicNode, value: SlotValue | None, token: str) -> DynamicNode:
    content = {**node.content, "src": _scalar(value, token)}
    for key, default in AUDIO_DEFAULTS.items():
        content.setdefault(key, default)
    return replace(node, content=content)


@register("dynamicUpload")
def fill_upload(node: DynamicNode, value: SlotValue | None, token: str) -> DynamicNode:
    file_type = value.file_type if isinstance(value, TaskValue) else DEFAULT_FILE_TYPE
    text = _scalar(value, token)

    if file_type == "document":
        # Document uploads are shown inline as text
        return replace(node, type="dynamicText", content={
            "type": "any",
            "limit": 1,
            "src": text,
            "innerText": text,
        })

    return replace(
        node,
        type=f"dynamic{file_type.capitalize()}",
        content={**node.content, "src": text},
    )


@register("dynamicCarousel")
def fill_carousel(node: DynamicNode, value: SlotValue | None, token: str) -> DynamicNode:
    if isinstance(value, CarouselContent):
        return replace(node, content={**node.content, **value.to_dict()})
    if value is not None:
        logger.warning("Scalar value supplied for carousel %r; keeping template slides", node.name)
    return node


def _value_at(values: Values, index: int) -> SlotValue | None:
    if isinstance(values, Mapping):
        return values.get(index)
    if 0 <= index < len(values):
        return values[index]
    return None


def _detached(node: Union[DynamicNode, LeafNode]) -> Union[DynamicNode, LeafNode]:
    """Copy of a leaf that shares no nested dicts or lists with the template."""
    return replace(node, content=copy.deepcopy(node.content), extra=copy.deepcopy(node.extra))


def fill(
    root: Sequence[TemplateNode],
    values: Values,
    placeholders: Sequence[Placeholder],
) -> list[TemplateNode]:
    """
    Produce a concrete copy of the template for one draft task.

    Args:
        root: Template nodes.
        values: Slot values indexed by placeholder index (list or mapping).
        placeholders: Placeholders of this template, matched to nodes by name.

    Returns:
        New node list. Slots without a value (or whose name matches no
        placeholder) carry their "{{type}}" token; carousels keep the
        template's slides.
    """
    by_name = {p.name: p for p in placeholders}

    def fill_node(node: TemplateNode) -> TemplateNode:
        if isinstance(node, ContainerNode):
            return replace(
                node,
                content=tuple(fill_node(child) for child in node.content),
                extra=copy.deepcopy(node.extra),
            )
        if isinstance(node, LeafNode):
            return _detached(node)
        if isinstance(node, DynamicNode):
            node = _detached(node)
            placeholder = by_name.get(node.name)
            if placeholder is None:
                logger.debug("No placeholder for %s %r; leaving token", node.type, node.name)
                return get_rule(node.type)(node, None, token_for(DYNAMIC_TYPES[node.type]))
            value = _value_at(values, placeholder.index)
            return get_rule(node.type)(node, value, placeholder.token)
        raise TypeError(f"Not a template node: {node!r}")

    return [fill_node(node) for node in root]
