"""AWS Lambda handler for task provisioning."""

import json
import logging

from ..api.serializers import serialize_plan, serialize_session
from ..clients import LLMClient, PersistenceError, TaskStoreClient
from ..config import LOG_LEVEL, TASK_STORE_TOKEN, TASK_STORE_URL
from ..engine import ProvisioningSession
from ..models.task import CarouselContent, TaskValue
from ..models.template import Project
from ..models.worker import Worker
from ..services import AIGenerationError, CsvImportError
from ..template import TemplateParseError

logger = logging.getLogger(__name__)


def _build_session() -> ProvisioningSession:
    task_store = TaskStoreClient(TASK_STORE_URL, TASK_STORE_TOKEN) if TASK_STORE_URL else None
    return ProvisioningSession(llm=LLMClient(), task_store=task_store)


def _response(status_code: int, body: dict) -> dict:
    return {"statusCode": status_code, "body": json.dumps(body)}


def _slot_value(data):
    if isinstance(data, str):
        return TaskValue(content=data)
    if "slides" in data:
        return CarouselContent.from_dict(data)
    return TaskValue(content=data.get("content", ""), file_type=data.get("fileType", "document"))


def _apply_drafts(session: ProvisioningSession, drafts: list[dict]) -> None:
    """Write manually entered drafts: [{"values": {"<index>": value}}, ...]."""
    for position, draft in enumerate(drafts):
        task = session.tasks[0] if position == 0 else session.store.add_task()
        for index, value in (draft.get("values") or {}).items():
            session.store.set_value(task.id, int(index), _slot_value(value))


def run(body: dict, session: ProvisioningSession) -> dict:
    """Execute one provisioning request against a session. Returns the response body."""
    project = Project(id=body["project"]["id"], name=body["project"].get("name", ""))
    if "template" in body:
        session.load(body["template"], project)
    else:
        session.load_by_id(body["templateId"], project)

    if body.get("tasks"):
        _apply_drafts(session, body["tasks"])

    if body.get("csv"):
        session.import_csv(body["csv"])

    ai = body.get("ai")
    if ai:
        session.generate(
            prompt=ai["prompt"],
            target_count=int(ai["count"]),
            placeholder=ai["placeholder"],
            provider=ai.get("provider", ""),
            model=ai.get("model", ""),
            api_key=ai.get("apiKey", ""),
        )

    broadcast = bool(body.get("assignToAllWorkers"))
    if broadcast or "workers" in body:
        pool = body.get("workers")
        session.load_workers([Worker.from_dict(w) for w in pool] if pool is not None else None)
        filters = body.get("filters") or {}
        session.set_filter(
            filters.get("domains", []),
            filters.get("langs", []),
            filters.get("locations", []),
        )
    session.set_broadcast(broadcast)
    if not broadcast and body.get("repeat"):
        session.set_repeat_count(int(body["repeat"]))

    summary = serialize_session(session.placeholders, session.tasks, session.settings.repeat_count)

    if body.get("dryRun"):
        plan = session.plan()
        return {**summary, "plan": serialize_plan(plan), "committed": False}

    result = session.commit()
    return {
        **summary,
        "plan": serialize_plan(result.plan),
        "committed": True,
        "stored": len(result.stored),
    }


def handler(event, context):
    """
    AWS Lambda handler - triggered by SQS or HTTP.

    Input payload:
    {
        "project": {"id": "p1", "name": "Sentiment"},
        "template": {"id": "t1", "name": "Review", "content": "[...]", "timer": 60},
        "csv": "Review\\nGreat product\\n",
        "repeat": 3
    }

    Optional: "templateId" (instead of "template"), "tasks", "ai",
    "assignToAllWorkers", "filters", "workers", "dryRun".
    """
    # Handle SQS event format
    if "Records" in event:
        body = json.loads(event["Records"][0]["body"])
    else:
        body = json.loads(event.get("body", "{}"))

    if not body.get("project") or not (body.get("template") or body.get("templateId")):
        return _response(400, {"error": "Missing 'project' or 'template' field"})

    try:
        session = _build_session()
        return _response(200, run(body, session))
    except (TemplateParseError, CsvImportError, KeyError, IndexError, ValueError) as e:
        logger.warning("Rejected request: %s", e)
        return _response(400, {"error": str(e), "type": type(e).__name__})
    except (PersistenceError, AIGenerationError) as e:
        logger.error("Upstream failure: %s", e)
        return _response(502, {"error": str(e), "type": type(e).__name__})
    except Exception as e:
        logger.exception("Provisioning failed")
        return _response(500, {"error": str(e)})


# Local testing
if __name__ == "__main__":
    import sys

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    if len(sys.argv) < 2:
        print("Usage: python -m provisioner.handlers.worker <request.json> [csv_file]")
        print()
        print("Arguments:")
        print("  request.json - JSON request body (see handler docstring)")
        print("  csv_file     - optional CSV file whose rows become draft tasks")
        print()
        print("Example:")
        print('  python -m provisioner.handlers.worker request.json rows.csv')
        sys.exit(1)

    with open(sys.argv[1], encoding="utf-8") as f:
        test_input = json.load(f)

    if len(sys.argv) > 2:
        with open(sys.argv[2], encoding="utf-8") as f:
            test_input["csv"] = f.read()

    print("Running with input:", flush=True)
    print(json.dumps({k: v for k, v in test_input.items() if k != "csv"}, indent=2), flush=True)
    print()

    event = {"body": json.dumps(test_input)}

    result = handler(event, None)
    print(f"\nResult ({result['statusCode']}):")
    print(json.dumps(json.loads(result["body"]), indent=2))
