"""
Storage interface for buckets and tasks.

Every method is scoped by the owning user id. Lookups of an id that belongs
to someone else behave exactly like lookups of an id that doesn't exist.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

# Columns a task update may touch.
UPDATABLE_TASK_FIELDS = ("assignment_name", "description", "due_date", "bucket_id")


@dataclass
class BucketRecord:
    id: str
    name: str
    user_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record) -> "BucketRecord":
        return cls(
            id=str(record["id"]),
            name=record["name"],
            user_id=record["user_id"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


@dataclass
class TaskRecord:
    id: str
    bucket_id: str
    bucket_name: str
    raw: str
    assignment_name: Optional[str]
    description: Optional[str]
    due_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, record) -> "TaskRecord":
        return cls(
            id=str(record["id"]),
            bucket_id=str(record["bucket_id"]),
            bucket_name=record["bucket_name"],
            raw=record["raw"],
            assignment_name=record["assignment_name"],
            description=record["description"],
            due_date=record["due_date"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


class BucketStore(ABC):

    @abstractmethod
    async def list_buckets(self, user_id: str) -> list[BucketRecord]:
        """All of the user's buckets, oldest first."""

    @abstractmethod
    async def list_tasks(self, user_id: str) -> list[TaskRecord]:
        """All tasks in the user's buckets, oldest first."""

    @abstractmethod
    async def get_bucket(self, user_id: str, bucket_id: str) -> Optional[BucketRecord]:
        ...

    @abstractmethod
    async def get_bucket_by_name(self, user_id: str, name: str) -> Optional[BucketRecord]:
        """Exact (case-sensitive) name lookup."""

    @abstractmethod
    async def create_bucket(self, user_id: str, name: str) -> tuple[BucketRecord, bool]:
        """
        Insert a bucket, or return the user's existing bucket with the same
        normalized name. The flag is True only when a row was inserted.
        """

    @abstractmethod
    async def rename_bucket(self, user_id: str, bucket_id: str, name: str) -> bool:
        """False if not owned or the new name collides with another bucket."""

    @abstractmethod
    async def delete_bucket(self, user_id: str, bucket_id: str) -> bool:
        """Deletes the bucket and all of its tasks."""

    @abstractmethod
    async def get_task(self, user_id: str, task_id: str) -> Optional[TaskRecord]:
        ...

    @abstractmethod
    async def create_task(
        self,
        user_id: str,
        bucket_id: str,
        raw: str,
        assignment_name: Optional[str],
        description: Optional[str],
        due_date: Optional[datetime],
    ) -> Optional[TaskRecord]:
        """None when the bucket isn't the user's."""

    @abstractmethod
    async def update_task(self, user_id: str, task_id: str, changes: dict[str, Any]) -> bool:
        """
        Apply `changes` (keys from UPDATABLE_TASK_FIELDS) in one write.
        A bucket_id change is only applied when that bucket is the user's too;
        otherwise nothing is written.
        """

    @abstractmethod
    async def delete_task(self, user_id: str, task_id: str) -> bool:
        ...

    async def health_check(self) -> dict:
        return {"status": "healthy", "storage": type(self).__name__}


def check_task_changes(changes: dict[str, Any]) -> None:
    unknown = set(changes) - set(UPDATABLE_TASK_FIELDS)
    if unknown:
        raise ValueError(f"Unsupported task fields: {sorted(unknown)}")
