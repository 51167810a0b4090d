from __future__ import annotations
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _text_or_none(v: Any) -> Optional[str]:
    """Model output isn't trusted: anything that isn't a non-blank string is absent."""
    if not isinstance(v, str):
        return None
    v = v.strip()
    return v or None


class ParsedTask(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    assignment_name: Optional[str] = Field(default=None, alias="assignmentName")
    course_category: Optional[str] = Field(default=None, alias="courseCategory")
    # Not restricted here; membership in the task type enum is checked by the caller.
    type_tag: Optional[str] = Field(default=None, alias="typeTag")
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    due_time: Optional[str] = Field(default=None, alias="dueTime")
    description: Optional[str] = Field(default=None, alias="description")

    @field_validator("*", mode="before")
    @classmethod
    def loose_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)


class AssignmentResult(BaseModel):
    """What the model suggests for one task: an existing bucket or a new name, plus parsed fields."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    bucket_id: Optional[str] = Field(default=None, alias="bucketId")
    new_bucket_name: Optional[str] = Field(default=None, alias="newBucketName")
    parsed_task: ParsedTask = Field(default_factory=ParsedTask, alias="parsedTask")
    reason: Optional[str] = None

    @field_validator("bucket_id", "new_bucket_name", "reason", mode="before")
    @classmethod
    def loose_text(cls, v: Any) -> Optional[str]:
        return _text_or_none(v)

    @field_validator("parsed_task", mode="before")
    @classmethod
    def loose_parsed_task(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return {}
        return v

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["AssignmentResult"]:
        if not isinstance(payload, dict):
            return None
        return cls.model_validate(payload)
