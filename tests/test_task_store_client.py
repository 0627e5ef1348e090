import pytest
import requests

from provisioner.clients import PersistenceError, TaskStoreClient
from provisioner.clients import task_store as task_store_module
from provisioner.models import BroadcastAssignment, FilledTaskRecord, Worker


class FakeResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self._invalid_json = invalid_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON")
        return self._payload


@pytest.fixture()
def calls(monkeypatch):
    """Queue responses for requests.get/post and record every call."""
    state = {"responses": [], "calls": []}

    def fake(method):
        def call(url, json=None, headers=None, timeout=None):
            state["calls"].append({"method": method, "url": url, "json": json, "headers": headers})
            return state["responses"].pop(0)
        return call

    monkeypatch.setattr(task_store_module.requests, "get", fake("GET"))
    monkeypatch.setattr(task_store_module.requests, "post", fake("POST"))
    monkeypatch.setattr(task_store_module.time, "sleep", lambda s: None)
    return state


@pytest.fixture()
def client():
    return TaskStoreClient("https://tasks.example.com/api/", api_token="tok")


def _record(name="P - T - Task1.1"):
    return FilledTaskRecord(template_id="tpl-1", project_ref="proj-1", name=name, content=[], timer=30)


def test_requires_base_url():
    with pytest.raises(ValueError):
        TaskStoreClient("")


def test_get_template_sends_auth_header(client, calls):
    calls["responses"].append(FakeResponse(payload={"template": {"id": "tpl-1", "content": "[]"}}))

    assert client.get_template("tpl-1") == {"id": "tpl-1", "content": "[]"}
    call = calls["calls"][0]
    assert call["url"] == "https://tasks.example.com/api/templates/tpl-1"
    assert call["headers"]["Authorization"] == "Bearer tok"


def test_get_workers(client, calls):
    calls["responses"].append(FakeResponse(payload={"workers": [{"_id": "w1", "domain": ["finance"]}]}))

    workers = client.get_workers()

    assert workers == [Worker(id="w1", domain=frozenset({"finance"}))]


def test_create_tasks_payload(client, calls):
    calls["responses"].append(FakeResponse(payload={"success": True, "tasks": [{"_id": "t1"}]}))

    stored = client.create_tasks([_record()])

    assert stored == [{"_id": "t1"}]
    body = calls["calls"][0]["json"]
    assert body["tasks"][0] == {
        "project": "proj-1",
        "template": "tpl-1",
        "name": "P - T - Task1.1",
        "content": "[]",
        "timer": 30,
        "annotator": None,
        "reviewer": "",
        "type": "task",
    }


def test_save_repeat_tasks_payload(client, calls):
    calls["responses"].append(FakeResponse(payload={"tasks": []}))
    assignment = BroadcastAssignment(template=_record("P - T - Task1"), workers=[Worker(id="w1"), Worker(id="w2")])

    client.save_repeat_tasks([assignment])

    call = calls["calls"][0]
    assert call["url"].endswith("/tasks/repeat")
    assert call["json"]["repeatTasks"][0]["workers"] == ["w1", "w2"]
    assert call["json"]["repeatTasks"][0]["template"]["name"] == "P - T - Task1"


def test_retries_on_rate_limit(client, calls):
    calls["responses"].extend([FakeResponse(429), FakeResponse(429), FakeResponse(payload={"tasks": []})])

    assert client.create_tasks([_record()]) == []
    assert len(calls["calls"]) == 3


def test_non_positive_retry_setting_still_makes_one_request(calls):
    client = TaskStoreClient("https://tasks.example.com/api")
    calls["responses"].append(FakeResponse(payload={"tasks": []}))

    assert client._request_with_retry("GET", "https://tasks.example.com/api/workers", max_retries=0).status_code == 200
    assert len(calls["calls"]) == 1


def test_http_error_becomes_persistence_error(client, calls):
    calls["responses"].append(FakeResponse(500))

    with pytest.raises(PersistenceError) as exc_info:
        client.create_tasks([_record()])
    assert exc_info.value.status_code == 500


def test_unsuccessful_body_becomes_persistence_error(client, calls):
    calls["responses"].append(FakeResponse(payload={"success": False, "error": "quota"}))

    with pytest.raises(PersistenceError, match="quota"):
        client.create_tasks([_record()])


def test_invalid_json_becomes_persistence_error(client, calls):
    calls["responses"].append(FakeResponse(invalid_json=True))

    with pytest.raises(PersistenceError):
        client.get_workers()


def test_connection_error(client, monkeypatch):
    def refuse(*args, **kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(task_store_module.requests, "get", refuse)

    with pytest.raises(PersistenceError, match="refused"):
        client.get_template("x")
