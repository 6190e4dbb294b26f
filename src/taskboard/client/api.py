from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import httpx
from pydantic.alias_generators import to_camel

from .models import Task

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:5000"
API_PREFIX = "/api"


class ApiError(Exception):
    """
    A request to the Taskboard API failed.

    `status_code` is None when no response was received (connection refused,
    DNS failure, ...). `error` is the server's error category when it sent one,
    e.g. "NotFoundError".
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error

    @property
    def is_network_error(self) -> bool:
        return self.status_code is None


def _encode_value(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _encode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """snake_case python fields -> camelCase JSON body."""
    return {to_camel(k): _encode_value(v) for k, v in fields.items()}


class TaskboardClient:
    """Synchronous client for the Taskboard HTTP API.

    Pass an existing ``httpx.Client`` (for example FastAPI's TestClient) via
    `http`; otherwise one is created for `base_url` and closed by `close()`.
    """

    def __init__(self, base_url: str = DEFAULT_BASE_URL, *, http: Optional[httpx.Client] = None) -> None:
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(base_url=base_url.rstrip("/"))

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> TaskboardClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ----------------------------
    # transport helpers
    # ----------------------------
    def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{API_PREFIX}{path}"
        try:
            resp = self._http.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise ApiError(f"Could not reach the server: {e}") from e
        if resp.is_error:
            raise self._error_from(resp)
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.debug("%s %s returned a non-JSON body", method, url)
            raise ApiError("The server sent an invalid response", status_code=resp.status_code) from e

    @staticmethod
    def _error_from(resp: httpx.Response) -> ApiError:
        error: Optional[str] = None
        message = resp.reason_phrase or f"HTTP {resp.status_code}"
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error")
            message = body.get("message") or str(body.get("detail") or message)
        return ApiError(message, status_code=resp.status_code, error=error)

    # ----------------------------
    # tasks
    # ----------------------------
    def fetch_tasks(self) -> List[Task]:
        return [Task.model_validate(t) for t in self._request("GET", "/tasks")]

    def create_task(
        self,
        title: str,
        *,
        description: str = "",
        completed: bool = False,
        priority: str = "medium",
        due_date: Optional[date] = None,
        category: str = "personal",
    ) -> Task:
        body = _encode_fields(
            {
                "title": title,
                "description": description,
                "completed": completed,
                "priority": priority,
                "due_date": due_date,
                "category": category,
            }
        )
        return Task.model_validate(self._request("POST", "/tasks", json=body))

    def update_task(self, task_id: str, **fields: Any) -> Task:
        """Send only `fields` (snake_case names) as a partial update."""
        data = self._request("PATCH", f"/tasks/{quote(task_id, safe='')}", json=_encode_fields(fields))
        return Task.model_validate(data)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{quote(task_id, safe='')}")

    # ----------------------------
    # categories
    # ----------------------------
    def fetch_categories(self) -> List[str]:
        return list(self._request("GET", "/categories"))

    def create_category(self, name: str) -> str:
        return self._request("POST", "/categories", json={"name": name})["name"]

    def delete_category(self, name: str) -> None:
        self._request("DELETE", f"/categories/{quote(name, safe='')}")

    def load(self) -> Tuple[List[Task], List[str]]:
        """Fetch tasks and categories in parallel."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            tasks = pool.submit(self.fetch_tasks)
            categories = pool.submit(self.fetch_categories)
            return tasks.result(), categories.result()


__all__ = ["ApiError", "TaskboardClient", "DEFAULT_BASE_URL"]
