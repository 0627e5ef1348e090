"""Expand draft tasks into concrete task records."""

import logging
from collections.abc import Iterable, Sequence

from ..models.placeholder import Placeholder
from ..models.record import (
    RECORD_TYPE_TASK,
    RECORD_TYPE_TEMPLATE,
    FanOutPlan,
    FilledTaskRecord,
)
from ..models.task import DraftTask
from ..models.template import Project, Template
from ..models.worker import Worker
from ..template.filler import fill
from .worker_filter import filter_workers

logger = logging.getLogger(__name__)


class FanOutSettings:
    """Commit options: repeat count, broadcast switch and worker filter.

    While broadcasting, the repeat count always equals the number of
    filtered workers and cannot be set directly.
    """

    def __init__(self, pool: Sequence[Worker] = (), assign_to_all_workers: bool = False):
        self._pool = list(pool)
        self._domains: list[str] = []
        self._langs: list[str] = []
        self._locations: list[str] = []
        self._filtered = list(self._pool)
        self._repeat_count = 1
        self.assign_to_all_workers = assign_to_all_workers

    @property
    def pool(self) -> list[Worker]:
        return list(self._pool)

    @property
    def filtered_workers(self) -> list[Worker]:
        return list(self._filtered)

    @property
    def assign_to_all_workers(self) -> bool:
        return self._broadcast

    @assign_to_all_workers.setter
    def assign_to_all_workers(self, enabled: bool) -> None:
        self._broadcast = bool(enabled)
        if not self._broadcast:
            self._repeat_count = 1

    @property
    def repeat_count(self) -> int:
        if self._broadcast:
            return len(self._filtered)
        return self._repeat_count

    @repeat_count.setter
    def repeat_count(self, value: int) -> None:
        if self._broadcast:
            raise ValueError("Repeat count follows the worker filter while assigning to all workers")
        self._repeat_count = max(1, int(value))

    def set_pool(self, pool: Sequence[Worker]) -> None:
        self._pool = list(pool)
        self._refilter()

    def set_filter(
        self,
        domains: Iterable[str] = (),
        langs: Iterable[str] = (),
        locations: Iterable[str] = (),
    ) -> list[Worker]:
        """Apply new criteria; returns the filtered workers."""
        self._domains = list(domains)
        self._langs = list(langs)
        self._locations = list(locations)
        return self._refilter()

    def _refilter(self) -> list[Worker]:
        self._filtered = filter_workers(self._pool, self._domains, self._langs, self._locations)
        logger.debug("Worker filter: %d of %d workers", len(self._filtered), len(self._pool))
        return self.filtered_workers


def task_name(project: Project, template: Template, task: DraftTask, copy: int | None = None) -> str:
    """'<project> - <template> - Task<id>[.<copy>]'"""
    name = f"{project.name} - {template.name} - Task{task.id}"
    if copy is not None:
        name = f"{name}.{copy}"
    return name


class FanOutPlanner:
    """Turn draft tasks into persistable task records."""

    def __init__(self, template: Template, placeholders: Sequence[Placeholder], project: Project):
        self.template = template
        self.placeholders = list(placeholders)
        self.project = project

    def plan(
        self,
        tasks: Sequence[DraftTask],
        repeat_count: int,
        assign_to_all_workers: bool,
        filtered_workers: Sequence[Worker] = (),
    ) -> FanOutPlan:
        """
        Build the commit plan.

        Repeat mode: ``repeat_count`` unassigned copies per draft task.
        Broadcast mode: one template record per draft task, to be copied to
        each of ``filtered_workers`` by the persistence service.
        """
        if not tasks:
            raise ValueError("No draft tasks to commit")

        plan = FanOutPlan()
        for task in tasks:
            content = fill(self.template.nodes, task.values, self.placeholders)

            if assign_to_all_workers:
                plan.templates_for_assignment.append(
                    self._record(task_name(self.project, self.template, task), content, RECORD_TYPE_TEMPLATE)
                )
                continue

            if repeat_count < 1:
                raise ValueError(f"repeat_count must be >= 1, got {repeat_count}")
            for copy in range(1, repeat_count + 1):
                plan.singles.append(
                    self._record(task_name(self.project, self.template, task, copy), content, RECORD_TYPE_TASK)
                )

        if assign_to_all_workers:
            plan.workers = list(filtered_workers)
            logger.info(
                "Planned %d template records for %d workers",
                len(plan.templates_for_assignment),
                len(plan.workers),
            )
        else:
            logger.info("Planned %d task records (%d x %d)", len(plan.singles), len(tasks), repeat_count)
        return plan

    def plan_with(self, tasks: Sequence[DraftTask], settings: FanOutSettings) -> FanOutPlan:
        return self.plan(
            tasks,
            repeat_count=settings.repeat_count,
            assign_to_all_workers=settings.assign_to_all_workers,
            filtered_workers=settings.filtered_workers,
        )

    def _record(self, name: str, content, record_type: str) -> FilledTaskRecord:
        return FilledTaskRecord(
            template_id=self.template.id,
            project_ref=self.project.id,
            name=name,
            content=content,
            timer=self.template.timer,
            worker_assignment=None,
            reviewer="",
            type=record_type,
        )
