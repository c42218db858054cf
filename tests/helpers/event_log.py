from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tasktracker.eventlog.file_log import serialize_event, split_lines
from tasktracker.eventlog.interface import EventLog


class InMemoryEventLog(EventLog):
    """Event log kept as a single string buffer, mirroring the file layout."""

    def __init__(self, initial: str = "") -> None:
        self._data = initial

    def append(self, event: Mapping[str, Any]) -> None:
        self._data += serialize_event(event)

    def append_raw(self, line: str) -> None:
        self._data += line + "\n"

    def read_all(self) -> list[str]:
        return split_lines(self._data)

    @property
    def raw(self) -> str:
        return self._data


class FailingEventLog(EventLog):
    """Event log whose storage is unavailable."""

    def append(self, event: Mapping[str, Any]) -> None:
        raise PermissionError("event log is read-only")

    def read_all(self) -> list[str]:
        raise OSError("disk unavailable")


class BrokenEventLog(EventLog):
    """Event log that fails with something other than an OSError."""

    def append(self, event: Mapping[str, Any]) -> None:
        raise ValueError("cannot encode event")

    def read_all(self) -> list[str]:
        raise RuntimeError("log backend crashed")


__all__ = ["BrokenEventLog", "FailingEventLog", "InMemoryEventLog"]
