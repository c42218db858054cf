from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class EventLog(Protocol):
    """Append-only store of serialized events.

    Keep this tiny so a file, an in-memory list, or anything else with an
    ordered append can back the projection without changing callers.
    """

    def append(self, event: Mapping[str, Any]) -> None:
        """Serialize one event to a single line and append it."""

    def read_all(self) -> list[str]:
        """Return every non-blank line in append order."""


__all__ = ["EventLog"]
