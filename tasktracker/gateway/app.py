from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from tasktracker.eventlog.interface import EventLog
from tasktracker.observability import (
    configure_uvicorn_logging,
    get_json_logger,
    get_metrics,
    use_request_context,
)
from tasktracker.tasks.service import TaskFields, TaskService


class CreateTaskRequest(BaseModel):
    name: str | None = None
    date: str | None = None
    time: str | None = None
    description: str | None = None


class TaskJSONResponse(JSONResponse):
    """JSON response that still renders strings holding lone surrogates.

    Such strings can come back out of the log; they are sent as \\u escapes.
    """

    def render(self, content: Any) -> bytes:
        try:
            return super().render(content)
        except UnicodeEncodeError:
            return json.dumps(content, allow_nan=False, separators=(",", ":")).encode("ascii")


def _error(status_code: int, message: str) -> JSONResponse:
    return TaskJSONResponse(status_code=status_code, content={"ok": False, "error": message})


def create_app(
    log: EventLog,
    *,
    static_dir: str | Path | None = None,
    service: TaskService | None = None,
) -> FastAPI:
    app = FastAPI(title="tasktracker", default_response_class=TaskJSONResponse)
    # Configure uvicorn logging at app creation to avoid import-time side effects
    configure_uvicorn_logging()
    logger = get_json_logger("tasktracker.gateway")
    metrics = get_metrics()
    tasks = service or TaskService(log)

    def _log_failure(path: str, message: str) -> None:
        logger.error(message, exc_info=True, extra={"event": "gateway_error", "path": path})
        metrics.increment("gateway_errors", {"path": path})

    @app.middleware("http")
    async def _request_context(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        with use_request_context(request.headers.get("X-Request-ID")) as request_id:
            started = time.perf_counter()
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.debug(
                "request handled",
                extra={
                    "event": "http_request",
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": (time.perf_counter() - started) * 1000.0,
                },
            )
            return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/ready")
    async def ready() -> dict[str, str]:
        try:
            await asyncio.to_thread(tasks.log.read_all)
        except Exception as exc:  # noqa: BLE001
            _log_failure("ready", "event log not ready")
            raise HTTPException(status_code=503, detail="event log not ready") from exc
        return {"status": "ok"}

    @app.get("/api/tasks")
    async def list_tasks() -> Any:
        try:
            current = await asyncio.to_thread(tasks.project_tasks)
        except Exception:  # noqa: BLE001
            _log_failure("list", "failed to read tasks")
            return _error(500, "Failed to read tasks.")
        metrics.increment("task_list_requests")
        return {"ok": True, "tasks": [t.to_wire() for t in current]}

    @app.post("/api/tasks", status_code=201)
    async def create_task(body: CreateTaskRequest | None = None) -> Any:
        payload = body or CreateTaskRequest()
        name = (payload.name or "").strip()
        if not name:
            return _error(400, "Name is required.")
        fields = TaskFields(
            name=name,
            date=payload.date or "",
            time=payload.time or "",
            description=payload.description or "",
        )
        try:
            task_id = await asyncio.to_thread(tasks.append_create, fields)
        except Exception:  # noqa: BLE001
            _log_failure("create", "failed to create task")
            return _error(500, "Failed to create task.")
        return {"ok": True, "id": task_id}

    @app.delete("/api/tasks/{task_id}")
    async def delete_task(task_id: str) -> Any:
        if not task_id.strip():
            return _error(400, "Task ID required.")
        try:
            await asyncio.to_thread(tasks.append_delete, task_id)
        except Exception:  # noqa: BLE001
            _log_failure("delete", "failed to delete task")
            return _error(500, "Failed to delete task.")
        return {"ok": True}

    # Mounted last so the API routes above take precedence over "/"
    if static_dir is not None and Path(static_dir).is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app


__all__ = ["CreateTaskRequest", "create_app"]
