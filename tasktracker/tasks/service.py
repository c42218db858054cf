from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel

from tasktracker.eventlog.interface import EventLog
from tasktracker.models.events import CreateEvent, DeleteEvent, Task, utc_now_iso
from tasktracker.observability import get_json_logger, get_metrics
from tasktracker.projection import project

from .ids import make_task_id


class TaskFields(BaseModel):
    """Already-validated fields for a new task."""

    name: str
    date: str = ""
    time: str = ""
    description: str = ""


class TaskService:
    """Write and read path over an event log.

    Writes append ``create``/``delete`` events; reads replay the whole log.
    Nothing is cached between calls.
    """

    def __init__(
        self,
        log: EventLog,
        *,
        id_factory: Callable[[], str] = make_task_id,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self._log = log
        self._id_factory = id_factory
        self._clock = clock
        self._logger = get_json_logger("tasktracker.tasks")

    @property
    def log(self) -> EventLog:
        return self._log

    def project_tasks(self) -> list[Task]:
        return project(self._log.read_all(), now=self._clock)

    def append_create(self, fields: TaskFields) -> str:
        task_id = self._id_factory()
        event = CreateEvent(
            id=task_id,
            name=fields.name,
            date=fields.date,
            time=fields.time,
            description=fields.description,
            created_at=self._clock(),
        )
        self._log.append(event.to_wire())
        self._logger.info("task created", extra={"event": "task_created", "task_id": task_id})
        get_metrics().increment("tasks_created")
        return task_id

    def append_delete(self, task_id: str) -> None:
        event = DeleteEvent(id=task_id, deleted_at=self._clock())
        self._log.append(event.to_wire())
        self._logger.info("task deleted", extra={"event": "task_deleted", "task_id": task_id})
        get_metrics().increment("tasks_deleted")


__all__ = ["TaskFields", "TaskService"]
