import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from api.routers.calendar import dump_calendar
from taskbuckets.models import TaskUpdate

router = APIRouter()
logger = logging.getLogger(__name__)


class MoveTaskIn(BaseModel):
    bucket_id: str


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    task = await backend.get_task(user_id, task_id)
    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"task": task.model_dump()}


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdate,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    """Edit task fields; returns the calendar view."""
    calendar = await backend.update_task(user_id, task_id, payload)
    return {"calendar": dump_calendar(calendar)}


@router.post("/tasks/{task_id}/complete")
async def complete_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    buckets = await backend.complete_task(user_id, task_id)
    return {"buckets": [b.model_dump() for b in buckets]}


@router.post("/tasks/{task_id}/move")
async def move_task(
    task_id: str,
    payload: MoveTaskIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    buckets = await backend.move_task(user_id, task_id, payload.bucket_id)
    return {"buckets": [b.model_dump() for b in buckets]}
