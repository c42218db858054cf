from .ids import make_task_id
from .service import TaskFields, TaskService

__all__ = ["TaskFields", "TaskService", "make_task_id"]
