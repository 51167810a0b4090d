"""
Read-side views over stored buckets and tasks.

Type tag, priority and the date/time split are recomputed here on every
call; nothing derived is ever read back from storage.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List

from classification.task_type import categorize_task_type, derive_priority
from scheduling.due_dates import split_due_date
from storage.base import BucketRecord, TaskRecord
from taskbuckets.models import Bucket, CalendarTask, TaskItem

UNSCHEDULED_KEY = "unscheduled"


def _derived_fields(task: TaskRecord, today: date) -> dict:
    due_date, due_time = split_due_date(task.due_date)
    return {
        "due_date": due_date,
        "due_time": due_time,
        "type_tag": categorize_task_type(task.raw, task.assignment_name, task.description),
        "priority": derive_priority(
            task.raw, task.assignment_name, task.description, task.due_date, today
        ),
    }


def to_task_item(task: TaskRecord, today: date) -> TaskItem:
    return TaskItem(
        id=task.id,
        raw=task.raw,
        assignment_name=task.assignment_name,
        description=task.description,
        **_derived_fields(task, today),
    )


def to_calendar_task(task: TaskRecord, today: date) -> CalendarTask:
    return CalendarTask(
        id=task.id,
        bucket_id=task.bucket_id,
        bucket_name=task.bucket_name,
        raw=task.raw,
        assignment_name=task.assignment_name,
        description=task.description,
        **_derived_fields(task, today),
    )


def build_bucket_view(
    buckets: List[BucketRecord], tasks: List[TaskRecord], today: date
) -> List[Bucket]:
    """Buckets in creation order, each holding its tasks in creation order."""
    items_by_bucket: Dict[str, List[TaskItem]] = {}
    for task in sorted(tasks, key=lambda t: t.created_at):
        items_by_bucket.setdefault(task.bucket_id, []).append(to_task_item(task, today))

    return [
        Bucket(id=b.id, name=b.name, items=items_by_bucket.get(b.id, []))
        for b in sorted(buckets, key=lambda b: b.created_at)
    ]


def build_calendar_view(tasks: List[TaskRecord], today: date) -> Dict[str, List[CalendarTask]]:
    """
    Tasks keyed by due date ("YYYY-MM-DD"), earliest date first, with the
    "unscheduled" group last. Within a date: by due time, then creation time.
    """

    def sort_key(task: TaskRecord):
        return (task.due_date is None, task.due_date or datetime.min, task.created_at)

    grouped: Dict[str, List[CalendarTask]] = {}
    for task in sorted(tasks, key=sort_key):
        entry = to_calendar_task(task, today)
        grouped.setdefault(entry.due_date or UNSCHEDULED_KEY, []).append(entry)
    return grouped
