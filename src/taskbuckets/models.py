from __future__ import annotations

from typing import Literal, Optional, List, get_args

from pydantic import BaseModel, Field, field_validator


TaskType = Literal[
    "Homework",
    "Quiz",
    "Lab",
    "Test",
    "Project",
    "Event",
    "Reminder",
    "Other",
]

VALID_TASK_TYPES: tuple[str, ...] = get_args(TaskType)

PriorityLevel = Literal["High", "Medium", "Low"]


class TaskItem(BaseModel):
    """A task as shown inside its bucket. typeTag/priority are derived on read."""

    id: str
    raw: str
    assignment_name: Optional[str] = None
    due_date: Optional[str] = None  # YYYY-MM-DD
    due_time: Optional[str] = None  # HH:MM, absent when stored time is midnight
    description: Optional[str] = None
    type_tag: TaskType = "Other"
    priority: PriorityLevel = "Low"


class Bucket(BaseModel):
    id: str
    name: str
    items: List[TaskItem] = Field(default_factory=list)


class CalendarTask(BaseModel):
    id: str
    bucket_id: str
    bucket_name: str
    raw: str
    assignment_name: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    description: Optional[str] = None
    type_tag: TaskType = "Other"
    priority: PriorityLevel = "Low"


class TaskUpdate(BaseModel):
    """
    Partial task edit. Only fields the caller actually sent are applied
    (see model_fields_set); due_date=None sent explicitly clears the due date.
    """

    assignment_name: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    bucket_id: Optional[str] = None

    @field_validator("assignment_name", "description", "due_time", "bucket_id")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip()


class AssignmentOutcome(BaseModel):
    """
    Result of organizing one task. `task` holds the fields as decided at write
    time (including the model's type tag); `buckets` is the reloaded state.
    """

    task: Optional[TaskItem] = None
    bucket_id: Optional[str] = None
    bucket_created: bool = False
    buckets: List[Bucket] = Field(default_factory=list)

    @property
    def organized(self) -> bool:
        return self.task is not None
