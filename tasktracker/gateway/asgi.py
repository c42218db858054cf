from __future__ import annotations

from tasktracker.config import load_config
from tasktracker.eventlog.file_log import FileEventLog

from .app import create_app

_config = load_config()
app = create_app(FileEventLog(_config.event_file), static_dir=_config.static_dir)
