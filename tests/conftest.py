"""Shared test fixtures."""

from __future__ import annotations

import json

import pytest

from provisioner.models import Placeholder, Project, Worker
from provisioner.template import load_template

SAMPLE_NODES = [
    {
        "type": "section",
        "id": "s1",
        "content": [
            {"type": "dynamicText", "name": "Question", "id": "n1", "content": {"innerText": ""}},
            {"type": "heading", "content": "Read carefully"},
            {"type": "dynamicImage", "name": "Picture", "content": {"src": "", "width": 320}},
        ],
    },
    {"type": "dynamicUpload", "name": "Attachment", "content": {}},
    {
        "type": "dynamicCarousel",
        "name": "Gallery",
        "content": {
            "slides": [
                {"type": "image", "src": "a.png", "innerText": "A"},
                {"type": "text", "innerText": "B"},
            ],
            "autoSlide": True,
        },
    },
    {"type": "dynamicAudio", "name": "Clip", "content": {"language": "fr"}},
]


@pytest.fixture()
def sample_nodes() -> list[dict]:
    return json.loads(json.dumps(SAMPLE_NODES))


@pytest.fixture()
def template_record(sample_nodes) -> dict:
    return {"id": "tpl-1", "name": "Review", "content": json.dumps(sample_nodes), "timer": 90}


@pytest.fixture()
def loaded(template_record):
    """(Template, placeholders) for the sample template."""
    return load_template(template_record)


@pytest.fixture()
def two_slot_record() -> dict:
    nodes = [
        {"type": "dynamicText", "name": "Name", "content": {}},
        {"type": "dynamicText", "name": "Age", "content": {}},
    ]
    return {"id": "tpl-2", "name": "People", "content": json.dumps(nodes)}


@pytest.fixture()
def two_slot_placeholders() -> list[Placeholder]:
    return [
        Placeholder(type="text", index=0, name="Name"),
        Placeholder(type="text", index=1, name="Age"),
    ]


@pytest.fixture()
def project() -> Project:
    return Project(id="proj-1", name="Sentiment")


@pytest.fixture()
def worker_pool() -> list[Worker]:
    """Ten workers, four of them in finance."""
    rows = [
        ("w1", {"finance"}, {"en"}, "US"),
        ("w2", {"health"}, {"en", "es"}, "MX"),
        ("w3", {"Finance", "legal"}, {"fr"}, "FR"),
        ("w4", {"legal"}, {"en"}, "US"),
        ("w5", {"finance"}, {"de"}, "DE"),
        ("w6", set(), {"en"}, "GB"),
        ("w7", {"retail"}, {"es"}, "ES"),
        ("w8", {"FINANCE"}, {"en"}, "us"),
        ("w9", {"health"}, {"fr"}, "CA"),
        ("w10", {"retail", "legal"}, {"en"}, "US"),
    ]
    return [
        Worker(id=wid, domain=frozenset(domain), lang=frozenset(lang), location=loc)
        for wid, domain, lang, loc in rows
    ]


class FakeTaskStore:
    """In-memory stand-in for TaskStoreClient."""

    def __init__(self, template: dict | None = None, workers: list[Worker] | None = None, fail_with=None):
        self.template = template
        self.workers = workers or []
        self.fail_with = fail_with
        self.created = []
        self.repeat_saves = []

    def get_template(self, template_id: str) -> dict:
        return self.template

    def get_workers(self) -> list[Worker]:
        return list(self.workers)

    def create_tasks(self, records):
        if self.fail_with:
            raise self.fail_with
        self.created.append(list(records))
        return [{"_id": f"task-{i}", "name": r.name} for i, r in enumerate(records)]

    def save_repeat_tasks(self, assignments):
        if self.fail_with:
            raise self.fail_with
        self.repeat_saves.append(list(assignments))
        return [{"_id": f"tpl-{i}"} for i, _ in enumerate(assignments)]


@pytest.fixture()
def fake_task_store():
    return FakeTaskStore
