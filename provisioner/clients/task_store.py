"""Task store client - templates, worker directory and task persistence."""

import logging
import time
from typing import Any

import requests

from ..config import MAX_RETRIES, REQUEST_TIMEOUT_SECONDS
from ..models.record import BroadcastAssignment, FilledTaskRecord
from ..models.worker import Worker

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Task store call failed."""
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class TaskStoreClient:
    """Client for the platform's task service (JSON over HTTP)."""

    def __init__(self, base_url: str, api_token: str | None = None, timeout: float = REQUEST_TIMEOUT_SECONDS):
        if not base_url:
            raise ValueError("Task store base URL is required")
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout

    def _get_headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    def _request_with_retry(
        self,
        method: str,
        url: str,
        json: Any = None,
        max_retries: int = MAX_RETRIES,
    ) -> requests.Response:
        """Make request with exponential backoff on 429 errors."""
        response = None
        for attempt in range(max(1, max_retries)):
            if method == "POST":
                response = requests.post(url, json=json, headers=self._get_headers(), timeout=self.timeout)
            else:
                response = requests.get(url, headers=self._get_headers(), timeout=self.timeout)

            if response.status_code == 429:
                wait_time = 2 ** attempt
                logger.warning("Task store rate limited, retrying in %ds", wait_time)
                time.sleep(wait_time)
                continue

            return response

        return response

    def _call(self, method: str, path: str, json: Any = None) -> dict:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self._request_with_retry(method, url, json=json)
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise PersistenceError(f"Task store {method} {path} failed: {e}", status_code=status) from e
        except (requests.RequestException, ValueError) as e:
            raise PersistenceError(f"Task store {method} {path} failed: {e}") from e

        if isinstance(data, dict) and data.get("success") is False:
            raise PersistenceError(f"Task store {method} {path} rejected: {data.get('error', 'unknown error')}")
        return data

    def get_template(self, template_id: str) -> dict:
        """Fetch a template record: {id, name, content (JSON string), timer}."""
        data = self._call("GET", f"templates/{template_id}")
        return data.get("template", data)

    def get_workers(self) -> list[Worker]:
        """Fetch the whole worker pool."""
        data = self._call("GET", "workers")
        items = data.get("workers", []) if isinstance(data, dict) else data
        return [Worker.from_dict(item) for item in items]

    def create_tasks(self, records: list[FilledTaskRecord]) -> list[dict]:
        """Persist concrete tasks. Returns the stored task dicts."""
        data = self._call("POST", "tasks", json={"tasks": [r.to_payload() for r in records]})
        return data.get("tasks", [])

    def save_repeat_tasks(self, assignments: list[BroadcastAssignment]) -> list[dict]:
        """Persist template records; the service copies each to its workers."""
        payload = {
            "repeatTasks": [
                {
                    "template": a.template.to_payload(),
                    "workers": [w.id for w in a.workers],
                }
                for a in assignments
            ]
        }
        data = self._call("POST", "tasks/repeat", json=payload)
        return data.get("tasks", [])
