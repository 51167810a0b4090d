"""
In-process bucket store.

Used when no DATABASE_URL is configured (local development) and by the
test suite. Mirrors the PostgreSQL store: creation ordering, per-user
uniqueness of normalized bucket names and cascade on bucket delete.
"""

import asyncio
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Optional

from classification.bucket_matcher import normalize_bucket_name
from storage.base import BucketRecord, BucketStore, TaskRecord, check_task_changes


class InMemoryBucketStore(BucketStore):

    def __init__(self, clock=datetime.now):
        self._clock = clock
        self._lock = asyncio.Lock()
        # insertion order == creation order
        self._buckets: dict[str, BucketRecord] = {}
        self._tasks: dict[str, dict[str, Any]] = {}

    def _owned_bucket(self, user_id: str, bucket_id: str) -> Optional[BucketRecord]:
        bucket = self._buckets.get(bucket_id)
        if bucket is None or bucket.user_id != user_id:
            return None
        return bucket

    def _to_task_record(self, row: dict[str, Any]) -> TaskRecord:
        return TaskRecord(bucket_name=self._buckets[row["bucket_id"]].name, **row)

    def _owned_task(self, user_id: str, task_id: str) -> Optional[dict[str, Any]]:
        row = self._tasks.get(task_id)
        if row is None or self._owned_bucket(user_id, row["bucket_id"]) is None:
            return None
        return row

    async def list_buckets(self, user_id: str) -> list[BucketRecord]:
        return [replace(b) for b in self._buckets.values() if b.user_id == user_id]

    async def list_tasks(self, user_id: str) -> list[TaskRecord]:
        return [
            self._to_task_record(row)
            for row in self._tasks.values()
            if self._owned_bucket(user_id, row["bucket_id"]) is not None
        ]

    async def get_bucket(self, user_id: str, bucket_id: str) -> Optional[BucketRecord]:
        bucket = self._owned_bucket(user_id, bucket_id)
        return replace(bucket) if bucket else None

    async def get_bucket_by_name(self, user_id: str, name: str) -> Optional[BucketRecord]:
        for bucket in self._buckets.values():
            if bucket.user_id == user_id and bucket.name == name:
                return replace(bucket)
        return None

    async def create_bucket(self, user_id: str, name: str) -> tuple[BucketRecord, bool]:
        key = normalize_bucket_name(name)
        async with self._lock:
            for bucket in self._buckets.values():
                if bucket.user_id == user_id and normalize_bucket_name(bucket.name) == key:
                    return replace(bucket), False

            now = self._clock()
            bucket = BucketRecord(
                id=str(uuid.uuid4()),
                name=name,
                user_id=user_id,
                created_at=now,
                updated_at=now,
            )
            self._buckets[bucket.id] = bucket
            return replace(bucket), True

    async def rename_bucket(self, user_id: str, bucket_id: str, name: str) -> bool:
        key = normalize_bucket_name(name)
        async with self._lock:
            bucket = self._owned_bucket(user_id, bucket_id)
            if bucket is None:
                return False
            for other in self._buckets.values():
                if (
                    other.id != bucket_id
                    and other.user_id == user_id
                    and normalize_bucket_name(other.name) == key
                ):
                    return False
            bucket.name = name
            bucket.updated_at = self._clock()
            return True

    async def delete_bucket(self, user_id: str, bucket_id: str) -> bool:
        async with self._lock:
            if self._owned_bucket(user_id, bucket_id) is None:
                return False
            del self._buckets[bucket_id]
            for task_id in [t for t, row in self._tasks.items() if row["bucket_id"] == bucket_id]:
                del self._tasks[task_id]
            return True

    async def get_task(self, user_id: str, task_id: str) -> Optional[TaskRecord]:
        row = self._owned_task(user_id, task_id)
        return self._to_task_record(row) if row else None

    async def create_task(
        self,
        user_id: str,
        bucket_id: str,
        raw: str,
        assignment_name: Optional[str],
        description: Optional[str],
        due_date: Optional[datetime],
    ) -> Optional[TaskRecord]:
        async with self._lock:
            if self._owned_bucket(user_id, bucket_id) is None:
                return None
            now = self._clock()
            row = {
                "id": str(uuid.uuid4()),
                "bucket_id": bucket_id,
                "raw": raw,
                "assignment_name": assignment_name,
                "description": description,
                "due_date": due_date,
                "created_at": now,
                "updated_at": now,
            }
            self._tasks[row["id"]] = row
            return self._to_task_record(row)

    async def update_task(self, user_id: str, task_id: str, changes: dict[str, Any]) -> bool:
        check_task_changes(changes)
        async with self._lock:
            row = self._owned_task(user_id, task_id)
            if row is None:
                return False
            target = changes.get("bucket_id")
            if target is not None and self._owned_bucket(user_id, target) is None:
                return False
            row.update(changes)
            row["updated_at"] = self._clock()
            return True

    async def delete_task(self, user_id: str, task_id: str) -> bool:
        async with self._lock:
            if self._owned_task(user_id, task_id) is None:
                return False
            del self._tasks[task_id]
            return True
