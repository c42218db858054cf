from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from dataclasses import dataclass, field

from tasktracker.models.events import Task


@dataclass(slots=True)
class Buckets:
    """Tasks split by due time.

    - ``scheduled``: due strictly after ``now``, soonest first.
    - ``active``: due at or before ``now`` (most recent first), then tasks with
      no usable date/time.
    """

    scheduled: list[Task] = field(default_factory=list)
    active: list[Task] = field(default_factory=list)


def due_at(task: Task) -> dt.datetime | None:
    """Naive local datetime for a task, or None when date or time is missing."""
    if not task.date or not task.time:
        return None
    try:
        day = dt.date.fromisoformat(task.date)
        hh, _, mm = task.time.partition(":")
        return dt.datetime(day.year, day.month, day.day, int(hh or 0), int(mm or 0))
    except ValueError:
        return None


def bucket_tasks(tasks: Iterable[Task], now: dt.datetime | None = None) -> Buckets:
    current = now or dt.datetime.now()
    scheduled: list[tuple[dt.datetime, Task]] = []
    due: list[tuple[dt.datetime, Task]] = []
    undated: list[Task] = []
    for task in tasks:
        when = due_at(task)
        if when is None:
            undated.append(task)
        elif when > current:
            scheduled.append((when, task))
        else:
            due.append((when, task))
    scheduled.sort(key=lambda item: item[0])
    due.sort(key=lambda item: item[0], reverse=True)
    return Buckets(
        scheduled=[t for _, t in scheduled],
        active=[t for _, t in due] + undated,
    )


__all__ = ["Buckets", "bucket_tasks", "due_at"]
