from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from tasktracker.observability import get_json_logger


def serialize_event(event: Mapping[str, Any]) -> str:
    # json.dumps escapes control characters, so the line never holds a raw newline
    payload = dict(event)
    line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    try:
        line.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates have no UTF-8 form; \u escapes decode back to the same string
        line = json.dumps(payload, separators=(",", ":"))
    return line + "\n"


def split_lines(data: str) -> list[str]:
    return [line for line in data.split("\n") if line.strip()]


class FileEventLog:
    """JSON-lines event log backed by a single UTF-8 text file.

    - ``append`` opens the file in append mode and writes one line per call.
    - ``read_all`` reads the whole file start to finish.
    - A missing file is created empty on first access.

    There is no locking; concurrent writers rely on the filesystem's append
    semantics for a single write call.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._logger = get_json_logger("tasktracker.eventlog")

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_exists(self) -> None:
        if self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.touch()
        self._logger.info(
            "event log created",
            extra={"event": "eventlog_created", "event_file": str(self._path)},
        )

    def append(self, event: Mapping[str, Any]) -> None:
        line = serialize_event(event)
        if not self._path.parent.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)

    def read_all(self) -> list[str]:
        self._ensure_exists()
        # Undecodable bytes become U+FFFD so one bad line cannot fail the whole read
        data = self._path.read_text(encoding="utf-8", errors="replace")
        return split_lines(data)


__all__ = ["FileEventLog", "serialize_event", "split_lines"]
