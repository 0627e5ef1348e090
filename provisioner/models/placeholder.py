"""Placeholder definitions extracted from task templates."""

from dataclasses import dataclass

# Dynamic node type -> placeholder type
DYNAMIC_TYPES: dict[str, str] = {
    "dynamicText": "text",
    "dynamicVideo": "video",
    "dynamicImage": "img",
    "dynamicImageAnnotation": "img",
    "dynamicAudio": "audio",
    "dynamicUpload": "upload",
    "dynamicCarousel": "carousel",
}

PLACEHOLDER_TYPES = ("text", "video", "img", "audio", "upload", "carousel")


def is_dynamic(node_type: str | None) -> bool:
    """True for node types that carry a fill-in slot."""
    return node_type in DYNAMIC_TYPES


def token_for(placeholder_type: str) -> str:
    """Literal marker left in content for an unfilled slot, e.g. "{{img}}"."""
    return "{{" + placeholder_type + "}}"


@dataclass(frozen=True)
class Placeholder:
    """A fill-in slot of a template."""
    type: str       # one of PLACEHOLDER_TYPES
    index: int      # discovery order, stable per template
    name: str       # unique within the template, joins back to the node

    @property
    def token(self) -> str:
        return token_for(self.type)
