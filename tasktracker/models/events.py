from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def utc_now_iso() -> str:
    """UTC timestamp in the ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form used in the log."""
    now = datetime.datetime.now(datetime.UTC)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _WireModel(BaseModel):
    """Accept both snake_case and the camelCase keys used on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class CreateEvent(_WireModel):
    type: Literal["create"] = "create"
    id: str
    name: str
    date: str = ""
    time: str = ""
    description: str = ""
    created_at: str = Field(default_factory=utc_now_iso, alias="createdAt")


class DeleteEvent(_WireModel):
    type: Literal["delete"] = "delete"
    id: str
    deleted_at: str = Field(default_factory=utc_now_iso, alias="deletedAt")


class Task(_WireModel):
    """Live task as derived from the event log. Never persisted directly."""

    id: str
    name: str
    date: str = ""
    time: str = ""
    description: str = ""
    created_at: str = Field(alias="createdAt")


__all__ = ["CreateEvent", "DeleteEvent", "Task", "utc_now_iso"]
