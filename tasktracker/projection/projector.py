from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from tasktracker.models.events import Task, utc_now_iso
from tasktracker.observability import get_json_logger, get_metrics

_LINE_PREVIEW_CHARS = 200


@dataclass(frozen=True, slots=True)
class ProjectionState:
    """Accumulated view of the log.

    ``deleted`` collects every id that has seen a ``delete`` event. It is
    never consulted when applying ``create``, so a later ``create`` for the
    same id brings the task back.
    """

    tasks: dict[str, Task] = field(default_factory=dict)
    deleted: frozenset[str] = frozenset()


def _report_malformed(line: str, reason: str) -> None:
    get_json_logger("tasktracker.projection").warning(
        "skipping bad event line",
        extra={
            "event": "eventlog_malformed_line",
            "attributes": {"line": line[:_LINE_PREVIEW_CHARS], "reason": reason},
        },
    )
    get_metrics().increment("eventlog_malformed_lines")


def parse_event(line: str) -> dict[str, Any] | None:
    """Decode one log line, or return None (after logging) when it is unusable."""
    try:
        value = json.loads(line)
    except (ValueError, RecursionError) as exc:
        _report_malformed(line, str(exc))
        return None
    if not isinstance(value, dict):
        _report_malformed(line, f"expected a JSON object, got {type(value).__name__}")
        return None
    return value


def _task_from_create(event: Mapping[str, Any], now: Callable[[], str]) -> Task:
    return Task.model_validate(
        {
            "id": event.get("id"),
            "name": event.get("name"),
            "date": event.get("date") or "",
            "time": event.get("time") or "",
            "description": event.get("description") or "",
            "createdAt": event.get("createdAt") or now(),
        }
    )


def apply_event(
    state: ProjectionState,
    event: Mapping[str, Any],
    *,
    now: Callable[[], str] = utc_now_iso,
) -> ProjectionState:
    """Return the state that results from applying one event.

    - ``create`` replaces any existing task with the same id wholesale.
    - ``delete`` records the id and drops the task if present.
    - Any other ``type`` leaves the state untouched.
    """
    kind = event.get("type")
    if kind == "create":
        try:
            task = _task_from_create(event, now)
        except ValidationError as exc:
            _report_malformed(json.dumps(event, default=str), f"invalid create event: {exc}")
            return state
        tasks = dict(state.tasks)
        tasks[task.id] = task
        return ProjectionState(tasks=tasks, deleted=state.deleted)
    if kind == "delete":
        task_id = event.get("id")
        if not isinstance(task_id, str):
            return state
        tasks = {k: v for k, v in state.tasks.items() if k != task_id}
        return ProjectionState(tasks=tasks, deleted=state.deleted | {task_id})
    return state


def replay(
    lines: Iterable[str],
    *,
    now: Callable[[], str] = utc_now_iso,
    initial: ProjectionState | None = None,
) -> ProjectionState:
    state = initial if initial is not None else ProjectionState()
    for line in lines:
        if not line.strip():
            continue
        event = parse_event(line)
        if event is None:
            continue
        state = apply_event(state, event, now=now)
    return state


def project(lines: Iterable[str], *, now: Callable[[], str] = utc_now_iso) -> list[Task]:
    """Fold the event lines into the list of live tasks, in insertion order."""
    return list(replay(lines, now=now).tasks.values())


__all__ = ["ProjectionState", "apply_event", "parse_event", "project", "replay"]
