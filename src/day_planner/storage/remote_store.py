# src/day_planner/storage/remote_store.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import TransportError
from ..tasks.task_models import Task, WriteResult, decode_tasks

logger = logging.getLogger(__name__)


def _describe(exc: Exception) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "request timed out"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP error! status: {exc.response.status_code}"
    if isinstance(exc, httpx.HTTPError):
        return f"network error: {exc.__class__.__name__}"
    return str(exc) or exc.__class__.__name__


class RemoteTaskStore:
    """
    TaskStoreAdapter over a spreadsheet-backed web app.

    Protocol:
    - GET  <endpoint>                       -> JSON array of task records
    - POST <endpoint> {"action": ..., ...}  -> {"success": bool, "message": str?}

    Script-hosted endpoints answer POSTs with a redirect, so redirects are followed.
    Calls are sequential; nothing here retries.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        timeout_seconds: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not endpoint or not endpoint.strip():
            raise ValueError("Remote task store needs an API endpoint")
        self._endpoint = endpoint.strip()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds)),
            follow_redirects=True,
        )
        logger.info("RemoteTaskStore ready endpoint=%s", self._endpoint)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_all(self) -> list[Task]:
        try:
            resp = await self._client.get(self._endpoint)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("fetch_all failed: %s", _describe(exc))
            raise TransportError(f"Failed to load tasks from server: {_describe(exc)}") from exc

        try:
            tasks = decode_tasks(data)
        except ValueError as exc:
            raise TransportError(f"Failed to load tasks from server: {exc}") from exc
        logger.debug("Fetched %d tasks", len(tasks))
        return tasks

    async def _send(self, action: str, payload: dict[str, Any] | None = None) -> WriteResult:
        body = {"action": action, **(payload or {})}
        try:
            resp = await self._client.post(self._endpoint, json=body)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("API %s failed: %s", action, _describe(exc))
            return WriteResult.failure(f"Server error: {_describe(exc)}")

        if not isinstance(data, dict):
            return WriteResult.failure("Server error: unexpected response")

        message = data.get("message")
        message = str(message) if message is not None else None
        if not data.get("success"):
            logger.warning("API %s rejected: %s", action, message)
            return WriteResult.failure(message or "API request failed")

        logger.debug("API %s ok", action)
        return WriteResult.success(message)

    async def add(self, task: Task) -> WriteResult:
        return await self._send("addTask", {"task": task.to_dict()})

    async def update(self, task_id: str, fields: dict[str, Any]) -> WriteResult:
        return await self._send("updateTask", {"taskId": task_id, "updates": dict(fields)})

    async def delete(self, task_id: str) -> WriteResult:
        return await self._send("deleteTask", {"taskId": task_id})

    async def clear_one_time(self) -> WriteResult:
        return await self._send("clearOneTimeTasks")

    async def reset_recurring(self, new_instances: list[Task]) -> WriteResult:
        return await self._send(
            "resetRecurringTasks",
            {"newRecurringInstances": [t.to_dict() for t in new_instances]},
        )
