from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from itertools import count
from pathlib import Path

import pytest

from tasktracker.observability import reset_metrics

FIXED_NOW = "2025-10-20T08:00:00.000Z"


@pytest.fixture(autouse=True)
def _isolate_observability(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Fresh counters per test, JSON logs, and no handlers bound to a stale stdout."""
    monkeypatch.setenv("LOG_FORMAT", "json")
    reset_metrics()
    yield
    for name in list(logging.root.manager.loggerDict):
        if name == "tasktracker" or name.startswith("tasktracker."):
            lg = logging.getLogger(name)
            for h in list(lg.handlers):
                lg.removeHandler(h)


@pytest.fixture()
def fixed_clock() -> Callable[[], str]:
    return lambda: FIXED_NOW


@pytest.fixture()
def sequential_ids() -> Callable[[], str]:
    counter = count(1)
    return lambda: f"t_{next(counter)}"


@pytest.fixture()
def event_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "eventlist.txt"
