from .file_log import FileEventLog
from .interface import EventLog

__all__ = ["EventLog", "FileEventLog"]
