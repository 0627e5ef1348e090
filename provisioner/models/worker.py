"""Worker (annotator) model - fetched from the worker directory."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Worker:
    """A worker eligible for task assignment."""
    id: str
    domain: frozenset[str] = field(default_factory=frozenset)
    lang: frozenset[str] = field(default_factory=frozenset)
    location: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Worker":
        return cls(
            id=str(data.get("id") or data.get("_id")),
            domain=frozenset(data.get("domain") or ()),
            lang=frozenset(data.get("lang") or ()),
            location=data.get("location") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "domain": sorted(self.domain),
            "lang": sorted(self.lang),
            "location": self.location,
        }
