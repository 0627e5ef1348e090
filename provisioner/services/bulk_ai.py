"""Bulk AI content generation - one model call fills a slot across drafts."""

import logging
import re
from collections.abc import Sequence
from typing import Callable

from ..models.placeholder import Placeholder
from ..models.task import DEFAULT_FILE_TYPE, DraftTask, TaskValue
from .draft_store import DraftTaskStore

logger = logging.getLogger(__name__)

ModelCall = Callable[[str], str]

NUMBERED_LINE = re.compile(r"^[ \t]*\d+\.[ \t]*(\S.*?)[ \t\r]*$", re.MULTILINE)


class AIGenerationError(Exception):
    """Model call failed or returned nothing usable."""
    def __init__(self, message: str, raw_output: str | None = None):
        self.raw_output = raw_output
        super().__init__(message)


def build_prompt(prompt: str, target_count: int) -> str:
    """Wrap the operator prompt in the numbered-list instruction."""
    return (
        f"{prompt.strip()}\n\n"
        f"Generate exactly {target_count} distinct items.\n"
        f"Respond ONLY with a numbered list, one item per line, in the form:\n"
        f"1. <item>\n"
        f"2. <item>\n"
        f"...\n"
        f"{target_count}. <item>\n"
        f"Do not add any introduction, explanation, or text after the list."
    )


def resolve_prompt(prompt: str, placeholders: Sequence[Placeholder], tasks: Sequence[DraftTask]) -> str:
    """
    Replace ``{{<placeholder name>}}`` references with the drafts' current values.

    Each reference becomes "`1. <value>` `2. <value>` ..." over the drafts
    in order; untouched slots render as empty.
    """
    for placeholder in placeholders:
        reference = "{{" + placeholder.name + "}}"
        if reference not in prompt:
            continue
        rendered = []
        for position, task in enumerate(tasks, start=1):
            value = task.value_at(placeholder.index)
            text = value.content if isinstance(value, TaskValue) else ""
            rendered.append(f"`{position}. {text}`")
        prompt = prompt.replace(reference, " ".join(rendered))
    return prompt


def parse_numbered_list(raw: str, limit: int) -> list[str]:
    """First ``limit`` "N. text" lines of a response, prefixes removed."""
    if limit <= 0:
        return []
    return [m.group(1) for m in NUMBERED_LINE.finditer(raw)][:limit]


class BulkAIGenerator:
    """Fill one placeholder across many drafts from a single model response."""

    def __init__(self, store: DraftTaskStore, placeholders: Sequence[Placeholder]):
        self.store = store
        self.placeholders = list(placeholders)

    def generate_for_all(
        self,
        prompt: str,
        target_count: int,
        placeholder: Placeholder,
        model_call: ModelCall,
    ) -> list[DraftTask]:
        """
        Ask the model for ``target_count`` values and write them into the store.

        Item i updates the i-th existing draft, or appends a new draft holding
        only this slot. Fewer items than requested update fewer drafts.

        Returns the drafts that were updated or created, in item order.

        Raises:
            AIGenerationError: model call failed or returned an empty response.
                The store is left untouched.
        """
        if target_count < 1:
            raise ValueError(f"target_count must be >= 1, got {target_count}")
        if placeholder.type == "carousel":
            raise ValueError("Carousel placeholders cannot be filled from a text list")
        if not 0 <= placeholder.index < self.store.slot_count:
            raise IndexError(f"Placeholder index {placeholder.index} out of range")

        generation = self.store.generation
        resolved = resolve_prompt(prompt, self.placeholders, self.store.tasks)
        full_prompt = build_prompt(resolved, target_count)

        try:
            raw = model_call(full_prompt)
        except Exception as e:
            raise AIGenerationError(f"Model call failed: {e}") from e

        if not raw or not raw.strip():
            raise AIGenerationError("Model returned an empty response", raw_output=raw)

        if self.store.generation != generation:
            logger.warning("Discarding AI result for a reset or abandoned session")
            return []

        items = parse_numbered_list(raw, target_count)
        if len(items) < target_count:
            logger.warning("Model returned %d of %d requested items", len(items), target_count)
        else:
            logger.info("Model returned %d items for %r", len(items), placeholder.name)

        return self._apply(items, placeholder)

    def _apply(self, items: list[str], placeholder: Placeholder) -> list[DraftTask]:
        existing = self.store.tasks
        touched: list[DraftTask] = []

        for i, text in enumerate(items):
            if i < len(existing):
                task = existing[i]
                current = task.value_at(placeholder.index)
                file_type = current.file_type if isinstance(current, TaskValue) else DEFAULT_FILE_TYPE
            else:
                task = self.store.add_task()
                file_type = DEFAULT_FILE_TYPE
            self.store.set_value(task.id, placeholder.index, TaskValue(content=text, file_type=file_type))
            touched.append(task)

        return touched
