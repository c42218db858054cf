from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from tasktracker.observability import get_metrics
from tasktracker.projection import ProjectionState, apply_event, parse_event, project, replay


def _line(event: dict[str, Any]) -> str:
    return json.dumps(event, separators=(",", ":"))


def _create(task_id: str, name: str = "Task", **extra: Any) -> dict[str, Any]:
    event: dict[str, Any] = {
        "type": "create",
        "id": task_id,
        "name": name,
        "date": "2025-10-25",
        "time": "14:30",
        "description": "",
        "createdAt": "2025-10-20T08:00:00.000Z",
    }
    event.update(extra)
    return event


def _delete(task_id: str) -> dict[str, Any]:
    return {"type": "delete", "id": task_id, "deletedAt": "2025-10-21T08:00:00.000Z"}


def test_concrete_create_scenario(fixed_clock: Callable[[], str]) -> None:
    lines = [
        _line(
            {
                "type": "create",
                "id": "t_1",
                "name": "Test Task Name",
                "date": "2025-10-25",
                "time": "14:30",
                "description": "Test description",
            }
        )
    ]

    tasks = [t.to_wire() for t in project(lines, now=fixed_clock)]

    assert tasks == [
        {
            "id": "t_1",
            "name": "Test Task Name",
            "date": "2025-10-25",
            "time": "14:30",
            "description": "Test description",
            "createdAt": fixed_clock(),
        }
    ]


def test_create_then_delete_yields_nothing() -> None:
    assert project([_line(_create("t_2")), _line(_delete("t_2"))]) == []


def test_description_defaults_to_empty() -> None:
    event = _create("t_1")
    del event["description"]

    (task,) = project([_line(event)])
    assert task.description == ""


def test_existing_created_at_is_kept(fixed_clock: Callable[[], str]) -> None:
    (task,) = project([_line(_create("t_1"))], now=fixed_clock)
    assert task.created_at == "2025-10-20T08:00:00.000Z"


def test_recreate_after_delete_resurrects() -> None:
    lines = [
        _line(_create("t_1", "First")),
        _line(_delete("t_1")),
        _line(_create("t_1", "Again")),
    ]

    tasks = project(lines)
    assert [(t.id, t.name) for t in tasks] == [("t_1", "Again")]


def test_second_create_overwrites_all_fields() -> None:
    lines = [
        _line(_create("t_1", "Old", description="old description", time="09:00")),
        _line(_create("t_1", "New", time="10:00")),
    ]

    (task,) = project(lines)
    assert task.name == "New"
    assert task.time == "10:00"
    # Not merged: the later event had an empty description
    assert task.description == ""


def test_overwrite_keeps_original_position() -> None:
    lines = [
        _line(_create("a")),
        _line(_create("b")),
        _line(_create("a", "a v2")),
    ]

    assert [t.id for t in project(lines)] == ["a", "b"]


def test_resurrected_task_moves_to_end() -> None:
    lines = [
        _line(_create("a")),
        _line(_create("b")),
        _line(_delete("a")),
        _line(_create("a")),
    ]

    assert [t.id for t in project(lines)] == ["b", "a"]


def test_corrupt_line_is_skipped() -> None:
    lines = [
        _line(_create("t_1", "One")),
        "{not json",
        _line(_create("t_2", "Two")),
    ]

    tasks = project(lines)
    assert [t.id for t in tasks] == ["t_1", "t_2"]
    assert get_metrics().value("eventlog_malformed_lines") == 1


def test_non_object_line_is_skipped() -> None:
    tasks = project(["[1, 2]", '"create"', _line(_create("t_1"))])
    assert [t.id for t in tasks] == ["t_1"]
    assert get_metrics().value("eventlog_malformed_lines") == 2


def test_create_missing_id_is_skipped() -> None:
    event = _create("t_1")
    del event["id"]

    assert project([_line(event), _line(_create("t_2"))])[0].id == "t_2"


def test_delete_of_unknown_id_has_no_visible_effect() -> None:
    lines = [_line(_create("t_1")), _line(_delete("never-created"))]

    assert [t.id for t in project(lines)] == ["t_1"]


def test_unknown_event_types_are_ignored() -> None:
    lines = [
        _line(_create("t_1")),
        _line({"type": "complete", "id": "t_1"}),
        _line({"id": "t_1"}),
    ]

    assert [t.id for t in project(lines)] == ["t_1"]
    assert get_metrics().value("eventlog_malformed_lines") == 0


def test_blank_lines_are_ignored() -> None:
    assert [t.id for t in project(["", "  ", _line(_create("t_1"))])] == ["t_1"]


def test_empty_log_projects_to_empty_list() -> None:
    assert project([]) == []


def test_parse_event_returns_dict_or_none() -> None:
    assert parse_event('{"type":"delete","id":"x"}') == {"type": "delete", "id": "x"}
    assert parse_event("oops") is None


def test_apply_event_does_not_mutate_prior_state() -> None:
    start = ProjectionState()
    after_create = apply_event(start, _create("t_1"))
    after_delete = apply_event(after_create, _delete("t_1"))

    assert start.tasks == {}
    assert list(after_create.tasks) == ["t_1"]
    assert after_delete.tasks == {}
    assert after_delete.deleted == frozenset({"t_1"})
    assert after_create.deleted == frozenset()


def test_delete_set_does_not_block_create() -> None:
    state = ProjectionState(deleted=frozenset({"t_1"}))

    state = apply_event(state, _create("t_1"))
    assert "t_1" in state.tasks
    assert "t_1" in state.deleted


def test_delete_records_unknown_ids() -> None:
    state = apply_event(ProjectionState(), _delete("ghost"))
    assert state.deleted == frozenset({"ghost"})
    assert state.tasks == {}


def test_unknown_type_returns_same_state() -> None:
    state = ProjectionState()
    assert apply_event(state, {"type": "rename", "id": "t_1"}) is state


def test_missing_created_at_uses_clock() -> None:
    event = _create("t_1")
    del event["createdAt"]

    state = apply_event(ProjectionState(), event, now=lambda: "clock-value")
    assert state.tasks["t_1"].created_at == "clock-value"


@pytest.mark.parametrize("bad_name", [None, 42, ["x"]])
def test_create_with_invalid_name_is_skipped(bad_name: Any) -> None:
    event = _create("t_1", name="placeholder")
    event["name"] = bad_name

    state = apply_event(ProjectionState(), event)
    assert state.tasks == {}
    assert get_metrics().value("eventlog_malformed_lines") == 1


def test_replay_accepts_initial_state() -> None:
    base = replay([_line(_create("a"))])
    state = replay([_line(_create("b"))], initial=base)

    assert list(state.tasks) == ["a", "b"]


def test_deeply_nested_line_is_skipped() -> None:
    lines = [_line(_create("a")), "[" * 100000, _line(_create("b"))]

    tasks = project(lines)

    assert [t.id for t in tasks] == ["a", "b"]
    assert get_metrics().value("eventlog_malformed_lines") == 1


def test_replacement_characters_from_bad_bytes_are_skipped() -> None:
    lines = [_line(_create("a")), "�� garbage", _line(_create("b"))]

    assert [t.id for t in project(lines)] == ["a", "b"]
    assert parse_event("�") is None
