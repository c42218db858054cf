from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_EVENT_FILE = "eventlist.txt"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_STATIC_DIR = "public"


@dataclass(slots=True)
class AppConfig:
    event_file: Path
    host: str
    port: int
    static_dir: Path


def _resolve_path(raw: str | None, default: str) -> Path:
    value = (raw or "").strip() or default
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def _parse_port(raw: str | None) -> int:
    value = (raw or "").strip()
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        return DEFAULT_PORT
    return port if 0 < port < 65536 else DEFAULT_PORT


def load_config(env: dict[str, str] | None = None) -> AppConfig:
    e: dict[str, Any] = dict(os.environ)
    if env:
        e.update(env)
    return AppConfig(
        event_file=_resolve_path(e.get("EVENT_FILE"), DEFAULT_EVENT_FILE),
        host=(e.get("HOST") or "").strip() or DEFAULT_HOST,
        port=_parse_port(e.get("PORT")),
        static_dir=_resolve_path(e.get("STATIC_DIR"), DEFAULT_STATIC_DIR),
    )


__all__ = ["AppConfig", "load_config"]
