from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Tuple


def compose_due_date(due_date: Optional[str], due_time: Optional[str] = None) -> Optional[datetime]:
    """
    Merge a YYYY-MM-DD date and an optional HH:MM time into one naive datetime.

    Returns None when there is no date or the result doesn't parse; callers
    treat that as "could not schedule".
    """
    if not due_date:
        return None

    time_part = due_time or "00:00"
    if len(time_part) == 5:
        time_part = f"{time_part}:00"

    try:
        parsed = datetime.fromisoformat(f"{due_date}T{time_part}")
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def split_due_date(due: Optional[datetime]) -> Tuple[Optional[str], Optional[str]]:
    """
    Inverse of compose_due_date for display: ("YYYY-MM-DD", "HH:MM" | None).

    A midnight time-of-day means "no time given".
    """
    if due is None:
        return None, None

    date_str = due.strftime("%Y-%m-%d")
    if due.hour == 0 and due.minute == 0:
        return date_str, None
    return date_str, due.strftime("%H:%M")
