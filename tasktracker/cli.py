from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from typing import TextIO

from tasktracker.config import AppConfig, load_config
from tasktracker.eventlog.file_log import FileEventLog
from tasktracker.models.events import Task
from tasktracker.tasks.schedule import bucket_tasks
from tasktracker.tasks.service import TaskFields, TaskService


def _format_task(task: Task) -> str:
    date = f"Date: {task.date}" if task.date else "No date"
    time = f"Time: {task.time}" if task.time else "No time"
    line = f"  {task.name}  ({date} | {time} | ID: {task.id})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def _print_buckets(tasks: list[Task], out: TextIO) -> None:
    buckets = bucket_tasks(tasks)
    out.write(f"Scheduled ({len(buckets.scheduled)})\n")
    for t in buckets.scheduled:
        out.write(_format_task(t) + "\n")
    out.write(f"Dashboard ({len(buckets.active)})\n")
    for t in buckets.active:
        out.write(_format_task(t) + "\n")


def serve(cfg: AppConfig, host: str | None = None, port: int | None = None) -> None:
    # Defer heavy imports so list/add/delete stay lightweight
    import uvicorn

    from tasktracker.gateway.app import create_app

    app = create_app(FileEventLog(cfg.event_file), static_dir=cfg.static_dir)
    uvicorn.run(app, host=host or cfg.host, port=port or cfg.port, log_config=None)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("tasktracker")
    parser.add_argument("--event-file", help="Path to the event log (overrides EVENT_FILE)")
    sub = parser.add_subparsers(dest="cmd")

    p_serve = sub.add_parser("serve", help="Run the HTTP API and front end")
    p_serve.add_argument("--host")
    p_serve.add_argument("--port", type=int)

    p_list = sub.add_parser("list", help="Show scheduled and due tasks")
    p_list.add_argument("--json", action="store_true", help="Print the raw task list as JSON")

    p_add = sub.add_parser("add", help="Create a task")
    p_add.add_argument("name")
    p_add.add_argument("--date", default="", help="YYYY-MM-DD")
    p_add.add_argument("--time", default="", help="HH:MM (24h)")
    p_add.add_argument("--description", default="")

    p_delete = sub.add_parser("delete", help="Delete a task by id")
    p_delete.add_argument("task_id")
    return parser


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    stream = out or sys.stdout
    parser = _build_parser()
    args = parser.parse_args(argv)
    env = {"EVENT_FILE": args.event_file} if args.event_file else None
    cfg = load_config(env)

    if args.cmd == "serve":
        serve(cfg, host=args.host, port=args.port)
        return 0

    service = TaskService(FileEventLog(cfg.event_file))

    if args.cmd == "list":
        tasks = service.project_tasks()
        if args.json:
            stream.write(json.dumps([t.to_wire() for t in tasks], indent=2) + "\n")
        else:
            _print_buckets(tasks, stream)
        return 0

    if args.cmd == "add":
        name = args.name.strip()
        if not name:
            sys.stderr.write("error: name is required\n")
            return 2
        task_id = service.append_create(
            TaskFields(name=name, date=args.date, time=args.time, description=args.description)
        )
        stream.write(task_id + "\n")
        return 0

    if args.cmd == "delete":
        service.append_delete(args.task_id)
        return 0

    parser.print_help(stream)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
