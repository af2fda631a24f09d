from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


class Section(str, Enum):
    """The two independent task domains of the dashboard."""

    HEALTH = "health"
    ECO = "eco"

    @property
    def label(self) -> str:
        if self is Section.HEALTH:
            return "Health"
        return "Eco"


class ViewMode(str, Enum):
    """Navigation mode of a section cursor."""

    FOCUS = "focus"
    BROWSE = "browse"

    @property
    def label(self) -> str:
        if self is ViewMode.FOCUS:
            return "Focus"
        return "Browse"


class TaskDetails(BaseModel):
    """Static reference data shown next to a task. Never persisted."""

    model_config = ConfigDict(frozen=True)

    summary: str = ""
    why: str = ""
    tips: tuple[str, ...] = ()
    duration_minutes: Optional[int] = None


class Task(BaseModel):
    """A daily task inside one section."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    points: int = Field(default=0, ge=0)
    completed: bool = False
    details: Optional[TaskDetails] = None


class StoredTask(BaseModel):
    """Minimal persisted shape of a task; unknown or missing fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(min_length=1)
    label: str
    points: int = Field(ge=0)
    completed: bool


class TaskSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    points: int
    completed: bool


class DayTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    points: int = 0
    completed_count: int = 0
    health_completed: int = 0
    eco_completed: int = 0


class SnapshotAction(BaseModel):
    """What triggered a snapshot: a task toggle in a section, or a rollover."""

    model_config = ConfigDict(frozen=True)

    section: str
    task_id: Optional[str] = None
    completed: Optional[bool] = None


class DayEntry(BaseModel):
    """Immutable snapshot of the whole dashboard at one point in time."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    date: str
    timestamp: datetime
    totals: DayTotals
    health: tuple[TaskSnapshot, ...] = ()
    eco: tuple[TaskSnapshot, ...] = ()
    action: Optional[SnapshotAction] = None


class CursorState(BaseModel):
    index: int = 0
    mode: ViewMode = ViewMode.FOCUS


class CompletionNotice(BaseModel):
    """Fire-and-forget event emitted when a task becomes completed."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str = ""
    level: str = "success"
    href: Optional[str] = None


class NotificationItem(BaseModel):
    id: str = Field(default_factory=lambda: f"evt-{uuid4().hex[:12]}")
    title: str
    description: Optional[str] = None
    timestamp: datetime
    unread: bool = True
    href: Optional[str] = None
    level: str = "success"


__all__ = [
    "CompletionNotice",
    "CursorState",
    "DayEntry",
    "DayTotals",
    "NotificationItem",
    "Section",
    "SnapshotAction",
    "StoredTask",
    "Task",
    "TaskDetails",
    "TaskSnapshot",
    "ViewMode",
]
