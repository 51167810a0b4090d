"""
PostgreSQL-backed bucket store.

Each mutation is a single statement scoped by the target id and the owning
user id, so concurrent requests from the same user interleave at row level.
Bucket names are unique per user after normalization (bucket.name_key);
creation resolves a conflict by re-reading the row that won.
"""

import logging
import uuid
from datetime import datetime
from typing import Any, Optional

import asyncpg

from classification.bucket_matcher import normalize_bucket_name
from storage import db
from storage.base import (
    BucketRecord,
    BucketStore,
    TaskRecord,
    UPDATABLE_TASK_FIELDS,
    check_task_changes,
)

logger = logging.getLogger(__name__)

_TASK_COLUMNS = """
    t.id, t.bucket_id, b.name AS bucket_name, t.raw, t.assignment_name,
    t.description, t.due_date, t.created_at, t.updated_at
"""


class PostgresBucketStore(BucketStore):

    async def list_buckets(self, user_id: str) -> list[BucketRecord]:
        rows = await db.fetch(
            "SELECT * FROM bucket WHERE user_id = $1 ORDER BY created_at, id",
            user_id,
        )
        return [BucketRecord.from_record(r) for r in rows]

    async def list_tasks(self, user_id: str) -> list[TaskRecord]:
        rows = await db.fetch(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM task t JOIN bucket b ON b.id = t.bucket_id
            WHERE b.user_id = $1
            ORDER BY t.created_at, t.id
            """,
            user_id,
        )
        return [TaskRecord.from_record(r) for r in rows]

    async def get_bucket(self, user_id: str, bucket_id: str) -> Optional[BucketRecord]:
        row = await db.fetchrow(
            "SELECT * FROM bucket WHERE id = $1 AND user_id = $2",
            bucket_id,
            user_id,
        )
        return BucketRecord.from_record(row) if row else None

    async def get_bucket_by_name(self, user_id: str, name: str) -> Optional[BucketRecord]:
        row = await db.fetchrow(
            "SELECT * FROM bucket WHERE user_id = $1 AND name = $2 ORDER BY created_at LIMIT 1",
            user_id,
            name,
        )
        return BucketRecord.from_record(row) if row else None

    async def create_bucket(self, user_id: str, name: str) -> tuple[BucketRecord, bool]:
        key = normalize_bucket_name(name)
        async with db.transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO bucket (id, name, name_key, user_id)
                VALUES ($1, $2, $3, $4)
                ON CONFLICT (user_id, name_key) DO NOTHING
                RETURNING *
                """,
                str(uuid.uuid4()),
                name,
                key,
                user_id,
            )
            if row is not None:
                return BucketRecord.from_record(row), True

            # Read committed: this statement sees the row that won the conflict.
            existing = await conn.fetchrow(
                "SELECT * FROM bucket WHERE user_id = $1 AND name_key = $2",
                user_id,
                key,
            )
        if existing is None:
            # The conflicting row was deleted between the two statements.
            raise RuntimeError(f"Bucket {name!r} vanished while being created")
        logger.info(f"Reusing existing bucket {existing['id']} for name {name!r}")
        return BucketRecord.from_record(existing), False

    async def rename_bucket(self, user_id: str, bucket_id: str, name: str) -> bool:
        try:
            status = await db.execute(
                """
                UPDATE bucket SET name = $1, name_key = $2, updated_at = clock_timestamp()
                WHERE id = $3 AND user_id = $4
                """,
                name,
                normalize_bucket_name(name),
                bucket_id,
                user_id,
            )
        except asyncpg.UniqueViolationError:
            logger.info(f"Rename of bucket {bucket_id} to {name!r} collides with another bucket")
            return False
        return status.endswith(" 1")

    async def delete_bucket(self, user_id: str, bucket_id: str) -> bool:
        status = await db.execute(
            "DELETE FROM bucket WHERE id = $1 AND user_id = $2",
            bucket_id,
            user_id,
        )
        return status.endswith(" 1")

    async def get_task(self, user_id: str, task_id: str) -> Optional[TaskRecord]:
        row = await db.fetchrow(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM task t JOIN bucket b ON b.id = t.bucket_id
            WHERE t.id = $1 AND b.user_id = $2
            """,
            task_id,
            user_id,
        )
        return TaskRecord.from_record(row) if row else None

    async def create_task(
        self,
        user_id: str,
        bucket_id: str,
        raw: str,
        assignment_name: Optional[str],
        description: Optional[str],
        due_date: Optional[datetime],
    ) -> Optional[TaskRecord]:
        row = await db.fetchrow(
            f"""
            WITH t AS (
                INSERT INTO task (id, bucket_id, raw, assignment_name, description, due_date)
                SELECT $1, b.id, $3, $4, $5, $6
                FROM bucket b WHERE b.id = $2 AND b.user_id = $7
                RETURNING *
            )
            SELECT {_TASK_COLUMNS}
            FROM t JOIN bucket b ON b.id = t.bucket_id
            """,
            str(uuid.uuid4()),
            bucket_id,
            raw,
            assignment_name,
            description,
            due_date,
            user_id,
        )
        return TaskRecord.from_record(row) if row else None

    async def update_task(self, user_id: str, task_id: str, changes: dict[str, Any]) -> bool:
        check_task_changes(changes)

        assignments = []
        placeholders = {}
        args: list[Any] = [task_id, user_id]
        for column in UPDATABLE_TASK_FIELDS:
            if column in changes:
                args.append(changes[column])
                placeholders[column] = f"${len(args)}"
                assignments.append(f"{column} = {placeholders[column]}")
        assignments.append("updated_at = clock_timestamp()")

        query = f"""
            UPDATE task SET {", ".join(assignments)}
            WHERE id = $1
              AND bucket_id IN (SELECT id FROM bucket WHERE user_id = $2)
        """
        if "bucket_id" in changes:
            query += (
                " AND EXISTS (SELECT 1 FROM bucket"
                f" WHERE id = {placeholders['bucket_id']} AND user_id = $2)"
            )

        status = await db.execute(query, *args)
        return status.endswith(" 1")

    async def delete_task(self, user_id: str, task_id: str) -> bool:
        status = await db.execute(
            """
            DELETE FROM task
            WHERE id = $1
              AND bucket_id IN (SELECT id FROM bucket WHERE user_id = $2)
            """,
            task_id,
            user_id,
        )
        return status.endswith(" 1")

    async def health_check(self) -> dict:
        return await db.health_check()
