"""
Deterministic task typing and priority.

Both functions are pure and are re-run on every read, so stored rows never
carry a type tag or priority of their own.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Optional, Union

from taskbuckets.models import PriorityLevel, TaskType

# Order matters: the first group with any hit wins.
TYPE_PATTERNS: list[tuple[TaskType, list[re.Pattern]]] = [
    ("Homework", [re.compile(r"homework"), re.compile(r"\bhw\b"), re.compile(r"assignment")]),
    ("Quiz", [re.compile(r"quiz")]),
    ("Lab", [re.compile(r"lab\b"), re.compile(r"laboratory")]),
    ("Test", [re.compile(r"test"), re.compile(r"midterm"), re.compile(r"final exam"), re.compile(r"exam")]),
    ("Project", [re.compile(r"project"), re.compile(r"presentation")]),
    ("Event", [
        re.compile(r"event"),
        re.compile(r"meeting"),
        re.compile(r"rehearsal"),
        re.compile(r"game"),
        re.compile(r"practice"),
    ]),
    ("Reminder", [re.compile(r"reminder"), re.compile(r"note"), re.compile(r"remember")]),
]

URGENT_KEYWORDS = ("urgent", "asap", "today", "tonight", "immediately")
MEDIUM_KEYWORDS = ("exam", "test", "midterm", "assignment", "project", "meeting")


def categorize_task_type(
    raw: str,
    assignment_name: Optional[str] = None,
    description: Optional[str] = None,
) -> TaskType:
    source = f"{raw} {description or ''} {assignment_name or ''}".lower()

    for type_tag, patterns in TYPE_PATTERNS:
        if any(p.search(source) for p in patterns):
            return type_tag

    return "Other"


def derive_priority(
    raw: str,
    assignment_name: Optional[str],
    description: Optional[str],
    due_date: Optional[Union[date, datetime]],
    today: date,
) -> PriorityLevel:
    if due_date is not None:
        due_day = due_date.date() if isinstance(due_date, datetime) else due_date
        days = (due_day - today).days
        if days <= 1:
            # overdue falls in here as well
            return "High"
        if days <= 4:
            return "Medium"
        return "Low"

    context = f"{assignment_name or ''} {description or ''} {raw}".lower()
    if any(k in context for k in URGENT_KEYWORDS):
        return "High"
    if any(k in context for k in MEDIUM_KEYWORDS):
        return "Medium"
    return "Low"
