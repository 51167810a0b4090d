from typing import Dict, List

from fastapi import APIRouter, Depends

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from taskbuckets.models import CalendarTask

router = APIRouter()


def dump_calendar(calendar: Dict[str, List[CalendarTask]]) -> dict:
    return {day: [t.model_dump() for t in tasks] for day, tasks in calendar.items()}


@router.get("/calendar")
async def load_calendar(
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    """Tasks grouped by due date; undated tasks under "unscheduled"."""
    return {"calendar": dump_calendar(await backend.load_calendar(user_id))}


@router.delete("/calendar/tasks/{task_id}")
async def delete_task_from_calendar(
    task_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    calendar = await backend.delete_task_from_calendar(user_id, task_id)
    return {"calendar": dump_calendar(calendar)}
