import asyncio
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional

from api.metrics import BUCKETS_CREATED_TOTAL, CLASSIFICATION_FAILURES_TOTAL, TASKS_ORGANIZED_TOTAL
from classification.bucket_matcher import (
    DEFAULT_BUCKET_NAMES,
    FALLBACK_BUCKET_NAME,
    find_matching_bucket,
    is_reserved_bucket_name,
)
from classification.task_classifier import TaskClassifier
from classification.task_type import categorize_task_type, derive_priority
from llm.schemas import AssignmentResult
from scheduling.due_dates import compose_due_date
from storage.base import BucketRecord, BucketStore
from taskbuckets.models import (
    AssignmentOutcome,
    Bucket,
    CalendarTask,
    TaskItem,
    TaskUpdate,
    VALID_TASK_TYPES,
)
from taskbuckets.projections import (
    build_bucket_view,
    build_calendar_view,
    to_calendar_task,
    to_task_item,
)

logger = logging.getLogger(__name__)

DEFAULT_ASSIGNMENT_NAME = "Task"


class BackendAPI:
    """
    Central orchestration component: turns free-form task text into a stored
    task in the right bucket, and serves every bucket/task/calendar operation.

    Every operation takes the owning user id explicitly. Blank input and ids
    the user doesn't own are no-ops that return the current state.
    """

    def __init__(
        self,
        store: BucketStore,
        classifier: Optional[TaskClassifier] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.classifier = classifier or TaskClassifier()
        self.clock = clock

    # ------------------------------------------------------------------ reads

    async def _bucket_view(self, user_id: str) -> List[Bucket]:
        if not user_id:
            return []
        buckets = await self.store.list_buckets(user_id)
        tasks = await self.store.list_tasks(user_id)
        return build_bucket_view(buckets, tasks, self.clock().date())

    async def ensure_default_buckets(self, user_id: str) -> None:
        for name in DEFAULT_BUCKET_NAMES:
            if await self.store.get_bucket_by_name(user_id, name) is not None:
                continue
            _, created = await self.store.create_bucket(user_id, name)
            if created:
                BUCKETS_CREATED_TOTAL.inc()
                logger.info(f"Created default bucket {name!r} for user {user_id}")

    async def load_buckets(self, user_id: str) -> List[Bucket]:
        if not user_id:
            return []
        await self.ensure_default_buckets(user_id)
        return await self._bucket_view(user_id)

    async def load_calendar(self, user_id: str) -> Dict[str, List[CalendarTask]]:
        if not user_id:
            return {}
        tasks = await self.store.list_tasks(user_id)
        return build_calendar_view(tasks, self.clock().date())

    async def get_task(self, user_id: str, task_id: str) -> Optional[CalendarTask]:
        if not user_id or not task_id:
            return None
        task = await self.store.get_task(user_id, task_id)
        if task is None:
            return None
        return to_calendar_task(task, self.clock().date())

    # ------------------------------------------------------------- assignment

    async def assign_task(self, text: str, user_id: str) -> List[Bucket]:
        outcome = await self.organize_task(text, user_id)
        return outcome.buckets

    async def organize_task(self, text: str, user_id: str) -> AssignmentOutcome:
        """
        Classify `text` with the model, resolve (or create) its bucket, store
        the task, and return the reloaded bucket state.

        No task is written when the model gives no suggestion.
        """
        raw = (text or "").strip()
        if not raw or not user_id:
            return AssignmentOutcome(buckets=await self._bucket_view(user_id))

        # Missing credentials are a deployment error: fail this request loudly.
        self.classifier.ensure_configured()

        await self.ensure_default_buckets(user_id)
        existing = await self._bucket_view(user_id)

        now = self.clock()
        logger.info(f"Organizing task for user {user_id}: {raw[:50]}")
        suggestion = await asyncio.to_thread(
            self.classifier.classify, raw, existing, now.date()
        )
        if suggestion is None:
            CLASSIFICATION_FAILURES_TOTAL.inc()
            logger.warning(f"No classification for task {raw[:50]!r}; nothing stored")
            return AssignmentOutcome(buckets=existing)

        bucket, created = await self._resolve_bucket(user_id, suggestion, existing)

        parsed = suggestion.parsed_task
        assignment_name = parsed.assignment_name or parsed.course_category or DEFAULT_ASSIGNMENT_NAME
        description = parsed.description or raw
        due_date = compose_due_date(parsed.due_date, parsed.due_time)
        if parsed.due_date and due_date is None:
            logger.warning(
                f"Could not schedule task: bad due date {parsed.due_date!r} / {parsed.due_time!r}"
            )

        if parsed.type_tag in VALID_TASK_TYPES:
            type_tag = parsed.type_tag
        else:
            type_tag = categorize_task_type(raw, assignment_name, parsed.description)

        record = await self.store.create_task(
            user_id=user_id,
            bucket_id=bucket.id,
            raw=raw,
            assignment_name=assignment_name,
            description=description,
            due_date=due_date,
        )
        if record is None:
            # The bucket was deleted by a concurrent request.
            logger.warning(f"Bucket {bucket.id} disappeared before task could be stored")
            return AssignmentOutcome(buckets=await self._bucket_view(user_id))

        TASKS_ORGANIZED_TOTAL.inc()
        logger.info(
            f"Stored task {record.id} in bucket {bucket.name!r} "
            f"(type={type_tag}, due={due_date.isoformat() if due_date else 'none'})"
        )

        task = to_task_item(record, now.date()).model_copy(update={
            "type_tag": type_tag,
            "priority": derive_priority(raw, assignment_name, description, due_date, now.date()),
        })
        return AssignmentOutcome(
            task=task,
            bucket_id=bucket.id,
            bucket_created=created,
            buckets=await self._bucket_view(user_id),
        )

    async def _resolve_bucket(
        self, user_id: str, suggestion: AssignmentResult, existing: List[Bucket]
    ) -> tuple[Bucket, bool]:
        if suggestion.bucket_id:
            for bucket in existing:
                if bucket.id == suggestion.bucket_id:
                    return bucket, False
            logger.info(f"Suggested bucket id {suggestion.bucket_id!r} is not one of the user's")

        name = (
            suggestion.new_bucket_name
            or suggestion.parsed_task.course_category
            or FALLBACK_BUCKET_NAME
        )
        match = find_matching_bucket(name, existing)
        if match is not None:
            return match, False

        record, created = await self.store.create_bucket(user_id, name)
        if created:
            BUCKETS_CREATED_TOTAL.inc()
            logger.info(f"Created bucket {record.name!r} ({record.id}) for user {user_id}")
        return Bucket(id=record.id, name=record.name), created

    # -------------------------------------------------------------- mutations

    async def _owned_mutable_bucket(self, user_id: str, bucket_id: str) -> Optional[BucketRecord]:
        bucket = await self.store.get_bucket(user_id, bucket_id)
        if bucket is None or is_reserved_bucket_name(bucket.name):
            return None
        return bucket

    async def create_empty_bucket(self, user_id: str, name: str) -> List[Bucket]:
        name = (name or "").strip()
        if not user_id or not name:
            return await self._bucket_view(user_id)

        # Defaults first, so a look-alike name reuses them instead of taking their place.
        await self.ensure_default_buckets(user_id)
        record, created = await self.store.create_bucket(user_id, name)
        if created:
            BUCKETS_CREATED_TOTAL.inc()
            logger.info(f"Created empty bucket {name!r} ({record.id}) for user {user_id}")
        return await self.load_buckets(user_id)

    async def rename_bucket(self, user_id: str, bucket_id: str, name: str) -> List[Bucket]:
        name = (name or "").strip()
        if not user_id or not bucket_id or not name:
            return await self._bucket_view(user_id)

        if await self._owned_mutable_bucket(user_id, bucket_id) is None:
            return await self._bucket_view(user_id)

        if not await self.store.rename_bucket(user_id, bucket_id, name):
            logger.info(f"Bucket {bucket_id} not renamed to {name!r}")
        return await self.load_buckets(user_id)

    async def delete_bucket(self, user_id: str, bucket_id: str) -> List[Bucket]:
        if not user_id or not bucket_id:
            return await self._bucket_view(user_id)

        if await self._owned_mutable_bucket(user_id, bucket_id) is None:
            return await self._bucket_view(user_id)

        await self.store.delete_bucket(user_id, bucket_id)
        logger.info(f"Deleted bucket {bucket_id} for user {user_id}")
        return await self.load_buckets(user_id)

    async def complete_task(self, user_id: str, task_id: str) -> List[Bucket]:
        """Completing a task removes it."""
        if not user_id or not task_id:
            return await self._bucket_view(user_id)

        if await self.store.delete_task(user_id, task_id):
            logger.info(f"Completed task {task_id} for user {user_id}")
        return await self._bucket_view(user_id)

    async def delete_task_from_calendar(
        self, user_id: str, task_id: str
    ) -> Dict[str, List[CalendarTask]]:
        await self.complete_task(user_id, task_id)
        return await self.load_calendar(user_id)

    async def update_task(
        self, user_id: str, task_id: str, updates: TaskUpdate
    ) -> Dict[str, List[CalendarTask]]:
        """
        Apply the fields the caller sent. A non-blank due_date is recomposed
        with due_time (an unparseable pair leaves the stored value alone);
        an explicit null due_date clears it.
        """
        if not user_id or not task_id:
            return await self.load_calendar(user_id)

        sent = updates.model_fields_set
        changes = {}
        if "assignment_name" in sent:
            changes["assignment_name"] = updates.assignment_name
        if "description" in sent:
            changes["description"] = updates.description
        if "due_date" in sent:
            if updates.due_date is None:
                changes["due_date"] = None
            else:
                due = compose_due_date(updates.due_date.strip(), updates.due_time)
                if due is not None:
                    changes["due_date"] = due
        if updates.bucket_id:
            changes["bucket_id"] = updates.bucket_id

        if changes and not await self.store.update_task(user_id, task_id, changes):
            logger.warning(f"Task {task_id} not updated for user {user_id}")
        return await self.load_calendar(user_id)

    async def move_task(self, user_id: str, task_id: str, bucket_id: str) -> List[Bucket]:
        if not user_id or not task_id or not bucket_id:
            return await self._bucket_view(user_id)

        if not await self.store.update_task(user_id, task_id, {"bucket_id": bucket_id}):
            logger.warning(f"Task {task_id} not moved to bucket {bucket_id} for user {user_id}")
        return await self._bucket_view(user_id)
