"""In-memory draft task store for one provisioning session."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from ..models.task import (
    DEFAULT_FILE_TYPE,
    CarouselContent,
    DraftTask,
    SlotValue,
    TaskValue,
)

logger = logging.getLogger(__name__)


class DraftTaskStore:
    """Ordered draft tasks with one value slot per placeholder.

    Task ids are sequential and never reused, even across ``reset()``.
    Unknown task ids are ignored by every operation.
    """

    def __init__(self, slot_count: int):
        if slot_count < 0:
            raise ValueError("slot_count must be >= 0")
        self.slot_count = slot_count
        self._tasks: list[DraftTask] = []
        self._last_id = 0
        self.generation = 0

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def tasks(self) -> list[DraftTask]:
        return list(self._tasks)

    def get(self, task_id: int) -> DraftTask | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def add_task(self) -> DraftTask:
        self._last_id += 1
        task = DraftTask(id=self._last_id, values=[None] * self.slot_count)
        self._tasks.append(task)
        return task

    def remove_task(self, task_id: int) -> None:
        self._tasks = [t for t in self._tasks if t.id != task_id]

    def set_value(self, task_id: int, index: int, value: str | SlotValue) -> None:
        """
        Set a slot value.

        A plain string keeps the slot's current file type (default document).
        """
        self._check_index(index)
        task = self.get(task_id)
        if task is None:
            logger.debug("set_value on unknown task %s ignored", task_id)
            return

        if isinstance(value, str):
            current = task.values[index]
            file_type = current.file_type if isinstance(current, TaskValue) else DEFAULT_FILE_TYPE
            value = TaskValue(content=value, file_type=file_type)
        elif not isinstance(value, (TaskValue, CarouselContent)):
            raise TypeError(f"Unsupported slot value: {value!r}")

        task.values[index] = value

    def set_file_type(self, task_id: int, index: int, file_type: str) -> None:
        """Change a slot's file type, keeping its content."""
        self._check_index(index)
        task = self.get(task_id)
        if task is None:
            logger.debug("set_file_type on unknown task %s ignored", task_id)
            return

        current = task.values[index]
        if isinstance(current, TaskValue):
            task.values[index] = replace(current, file_type=file_type)
        else:
            task.values[index] = TaskValue(content="", file_type=file_type)

    def replace_all(self, rows: Sequence[Sequence[SlotValue | None]]) -> list[DraftTask]:
        """Swap every task for new ones built from value rows (fresh ids)."""
        for row in rows:
            if len(row) != self.slot_count:
                raise ValueError(f"Expected {self.slot_count} values per row, got {len(row)}")

        self._tasks = []
        for row in rows:
            task = self.add_task()
            task.values = list(row)
        return self.tasks

    def reset(self) -> DraftTask:
        """Drop every task and start over with one empty draft."""
        self._tasks = []
        self.generation += 1
        return self.add_task()

    def discard(self) -> None:
        """Abandon the session; pending results for it become stale."""
        self._tasks = []
        self.generation += 1

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.slot_count:
            raise IndexError(f"Placeholder index {index} out of range (0..{self.slot_count - 1})")
