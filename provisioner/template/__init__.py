"""Template parsing and filling."""

from .filler import fill, register
from .parser import TemplateParseError, extract_placeholders, load_template, parse_nodes

__all__ = [
    "TemplateParseError",
    "extract_placeholders",
    "fill",
    "load_template",
    "parse_nodes",
    "register",
]
