"""Serializers for session state and commit plans."""

from ..models.placeholder import Placeholder
from ..models.record import FanOutPlan, FilledTaskRecord
from ..models.task import DraftTask


def serialize_placeholder(placeholder: Placeholder) -> dict:
    return {
        "type": placeholder.type,
        "index": placeholder.index,
        "name": placeholder.name,
    }


def serialize_draft_task(task: DraftTask) -> dict:
    """Sparse form: only touched slots, keyed by placeholder index."""
    return {
        "id": task.id,
        "values": {str(index): value.to_dict() for index, value in task.touched().items()},
    }


def serialize_record(record: FilledTaskRecord) -> dict:
    payload = record.to_payload()
    return {
        "projectRef": payload["project"],
        "templateId": payload["template"],
        "name": payload["name"],
        "content": payload["content"],
        "timer": payload["timer"],
        "workerAssignment": payload["annotator"],
        "reviewer": payload["reviewer"],
        "type": payload["type"],
    }


def serialize_plan(plan: FanOutPlan) -> dict:
    """Serialize a fan-out plan for API response."""
    return {
        "singles": [serialize_record(r) for r in plan.singles],
        "templatesForAssignment": [
            {
                "template": serialize_record(a.template),
                "workers": [w.to_dict() for w in a.workers],
            }
            for a in plan.assignments()
        ],
    }


def serialize_session(placeholders: list[Placeholder], tasks: list[DraftTask], repeat_count: int) -> dict:
    return {
        "placeholders": [serialize_placeholder(p) for p in placeholders],
        "tasks": [serialize_draft_task(t) for t in tasks],
        "repeatCount": repeat_count,
        "totalTasks": len(tasks) * repeat_count,
    }
