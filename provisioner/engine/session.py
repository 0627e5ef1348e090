"""Provisioning session - template load, draft editing, generation and commit."""

import logging
from dataclasses import dataclass, field
from typing import Any

from ..clients.llm import LLMClient
from ..clients.task_store import TaskStoreClient
from ..models.placeholder import Placeholder
from ..models.record import FanOutPlan
from ..models.task import DraftTask
from ..models.template import Project, Template
from ..models.worker import Worker
from ..services.bulk_ai import BulkAIGenerator, ModelCall
from ..services.csv_import import CsvImporter
from ..services.draft_store import DraftTaskStore
from ..services.fanout import FanOutPlanner, FanOutSettings
from ..template.parser import load_template

logger = logging.getLogger(__name__)


@dataclass
class CommitResult:
    """What a commit sent and what the task store returned."""
    plan: FanOutPlan
    stored: list[dict] = field(default_factory=list)

    @property
    def record_count(self) -> int:
        return len(self.plan.singles) or len(self.plan.templates_for_assignment)


class ProvisioningSession:
    """One operator session over a single template.

    Not thread-safe: callers must not commit while a CSV import or AI
    generation for the same session is still running.
    """

    def __init__(self, llm: LLMClient | None = None, task_store: TaskStoreClient | None = None):
        self.llm = llm
        self.task_store = task_store
        self.template: Template | None = None
        self.project: Project | None = None
        self.placeholders: list[Placeholder] = []
        self.store = DraftTaskStore(0)
        self.settings = FanOutSettings()

    # ----- loading -----

    def load(self, template_record: dict[str, Any], project: Project) -> list[Placeholder]:
        """Parse a template record and start with one empty draft."""
        template, placeholders = load_template(template_record)
        self.store.discard()
        self.template = template
        self.project = project
        self.placeholders = placeholders
        self.store = DraftTaskStore(len(placeholders))
        self.store.add_task()
        return list(placeholders)

    def load_by_id(self, template_id: str, project: Project) -> list[Placeholder]:
        """Fetch a template from the task store, then load it."""
        return self.load(self._require_task_store().get_template(template_id), project)

    def load_workers(self, pool: list[Worker] | None = None) -> list[Worker]:
        """Set the worker pool, fetching it from the task store when not given."""
        if pool is None:
            pool = self._require_task_store().get_workers()
        self.settings.set_pool(pool)
        logger.info("Worker pool: %d workers", len(pool))
        return self.settings.filtered_workers

    # ----- drafts -----

    @property
    def tasks(self) -> list[DraftTask]:
        return self.store.tasks

    def placeholder(self, key: str | int) -> Placeholder:
        """Look up a placeholder by name or index."""
        for p in self.placeholders:
            if p.name == key or (isinstance(key, int) and p.index == key):
                return p
        raise KeyError(f"Unknown placeholder: {key!r}")

    def import_csv(self, source: str | bytes) -> list[DraftTask]:
        """Replace the drafts with the rows of a CSV file."""
        template = self._require_template()
        importer = CsvImporter(self.store, self.placeholders, template.nodes)
        return importer.import_source(source)

    def generate(
        self,
        prompt: str,
        target_count: int,
        placeholder: str | int | Placeholder,
        provider: str = "",
        model: str = "",
        api_key: str = "",
        model_call: ModelCall | None = None,
    ) -> list[DraftTask]:
        """Fill one placeholder across drafts from a single model call."""
        self._require_template()
        if not isinstance(placeholder, Placeholder):
            placeholder = self.placeholder(placeholder)

        if model_call is None:
            if self.llm is None:
                raise RuntimeError("No LLM client configured")
            context_id = self.project.id if self.project else ""
            model_call = self.llm.bind(provider, model, context_id=context_id, api_key=api_key)

        generator = BulkAIGenerator(self.store, self.placeholders)
        return generator.generate_for_all(prompt, target_count, placeholder, model_call)

    # ----- fan-out options -----

    def set_filter(self, domains=(), langs=(), locations=()) -> list[Worker]:
        return self.settings.set_filter(domains, langs, locations)

    def set_broadcast(self, enabled: bool) -> None:
        self.settings.assign_to_all_workers = enabled

    def set_repeat_count(self, count: int) -> None:
        self.settings.repeat_count = count

    # ----- commit -----

    def plan(self) -> FanOutPlan:
        template = self._require_template()
        planner = FanOutPlanner(template, self.placeholders, self.project)
        return planner.plan_with(self.store.tasks, self.settings)

    def commit(self) -> CommitResult:
        """
        Plan and persist the drafts.

        On success the drafts are cleared (one fresh empty draft remains). A
        PersistenceError propagates and leaves every draft in place.
        """
        task_store = self._require_task_store()
        plan = self.plan()

        if plan.is_broadcast:
            stored = task_store.save_repeat_tasks(plan.assignments())
        else:
            stored = task_store.create_tasks(plan.singles)

        result = CommitResult(plan=plan, stored=stored)
        logger.info("Committed %d records", result.record_count)
        self.store.reset()
        return result

    def discard(self) -> None:
        """Abandon the session; late AI results are ignored."""
        self.store.discard()

    def _require_template(self) -> Template:
        if self.template is None or self.project is None:
            raise RuntimeError("No template loaded")
        return self.template

    def _require_task_store(self) -> TaskStoreClient:
        if self.task_store is None:
            raise RuntimeError("No task store client configured")
        return self.task_store
