"""Draft task values."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Union

FILE_TYPES = ("image", "video", "document", "audio")
DEFAULT_FILE_TYPE = "document"


@dataclass(frozen=True)
class TaskValue:
    """Scalar value for one slot."""
    content: str = ""
    file_type: str = DEFAULT_FILE_TYPE

    def __post_init__(self):
        if self.file_type not in FILE_TYPES:
            raise ValueError(f"Unknown file type: {self.file_type}")

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "fileType": self.file_type}


@dataclass(frozen=True)
class CarouselSlide:
    type: str = "text"
    src: str | None = None
    inner_text: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.src is not None:
            data["src"] = self.src
        if self.inner_text is not None:
            data["innerText"] = self.inner_text
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CarouselSlide:
        return cls(
            type=data.get("type") or "text",
            src=data.get("src"),
            inner_text=data.get("innerText"),
        )


@dataclass(frozen=True)
class CarouselContent:
    """Composite value that replaces a whole carousel node body."""
    slides: tuple[CarouselSlide, ...] = ()
    keyboard_nav: bool | None = None
    auto_slide: bool | None = None
    slide_interval: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"slides": [s.to_dict() for s in self.slides]}
        if self.keyboard_nav is not None:
            data["keyboardNav"] = self.keyboard_nav
        if self.auto_slide is not None:
            data["autoSlide"] = self.auto_slide
        if self.slide_interval is not None:
            data["slideInterval"] = self.slide_interval
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CarouselContent:
        slides = data.get("slides") or []
        if not isinstance(slides, list):
            raise ValueError("Carousel 'slides' must be a list")
        return cls(
            slides=tuple(CarouselSlide.from_dict(s) for s in slides),
            keyboard_nav=data.get("keyboardNav"),
            auto_slide=data.get("autoSlide"),
            slide_interval=data.get("slideInterval"),
        )

    def blanked(self) -> CarouselContent:
        """Same structure with every slide's text and source emptied."""
        return replace(
            self,
            slides=tuple(replace(s, src="", inner_text="") for s in self.slides),
        )


SlotValue = Union[TaskValue, CarouselContent]


@dataclass
class DraftTask:
    """Operator-built bundle of slot values, indexed by placeholder index.

    ``values`` has one entry per placeholder; ``None`` means untouched.
    """
    id: int
    values: list[SlotValue | None] = field(default_factory=list)

    def value_at(self, index: int) -> SlotValue | None:
        if 0 <= index < len(self.values):
            return self.values[index]
        return None

    def touched(self) -> dict[int, SlotValue]:
        """Sparse view: only slots that hold a value."""
        return {i: v for i, v in enumerate(self.values) if v is not None}
