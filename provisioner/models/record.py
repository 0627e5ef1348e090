"""Concrete task records produced at commit time."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .template import TemplateNode, nodes_to_json
from .worker import Worker

RECORD_TYPE_TASK = "task"
RECORD_TYPE_TEMPLATE = "template"


@dataclass
class FilledTaskRecord:
    """A fully resolved task, ready for the persistence service."""
    template_id: str
    project_ref: str
    name: str
    content: list[TemplateNode]
    timer: int = 0
    worker_assignment: str | None = None
    reviewer: str = ""
    type: str = RECORD_TYPE_TASK

    def to_payload(self) -> dict[str, Any]:
        """Wire format: content is stored as a JSON string."""
        return {
            "project": self.project_ref,
            "template": self.template_id,
            "name": self.name,
            "content": nodes_to_json(self.content),
            "timer": self.timer,
            "annotator": self.worker_assignment,
            "reviewer": self.reviewer,
            "type": self.type,
        }


@dataclass
class BroadcastAssignment:
    """One template record plus the workers it is to be copied to."""
    template: FilledTaskRecord
    workers: list[Worker]


@dataclass
class FanOutPlan:
    """Planner output. Exactly one of the two lists is non-empty."""
    singles: list[FilledTaskRecord] = field(default_factory=list)
    templates_for_assignment: list[FilledTaskRecord] = field(default_factory=list)
    workers: list[Worker] = field(default_factory=list)

    @property
    def is_broadcast(self) -> bool:
        return bool(self.templates_for_assignment)

    def assignments(self) -> list[BroadcastAssignment]:
        return [
            BroadcastAssignment(template=record, workers=list(self.workers))
            for record in self.templates_for_assignment
        ]
