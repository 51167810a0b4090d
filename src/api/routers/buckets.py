import logging
import time
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from api.metrics import record_request
from taskbuckets.models import Bucket

router = APIRouter()
logger = logging.getLogger(__name__)

ORGANIZE_FAILED_MESSAGE = "Couldn't organize this task."


class AssignIn(BaseModel):
    text: str


class BucketNameIn(BaseModel):
    name: str


def _dump(buckets: List[Bucket]) -> list:
    return [b.model_dump() for b in buckets]


@router.get("/buckets")
async def load_buckets(
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    return {"buckets": _dump(await backend.load_buckets(user_id))}


@router.post("/buckets/assign")
async def assign_task(
    payload: AssignIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    """Classify free-form task text and file it into a bucket."""
    start = time.time()
    outcome = await backend.organize_task(payload.text, user_id)

    body = {
        "organized": outcome.organized,
        "buckets": _dump(outcome.buckets),
    }
    if outcome.organized:
        body["task"] = outcome.task.model_dump()
        body["bucket_id"] = outcome.bucket_id
        body["bucket_created"] = outcome.bucket_created
        record_request("/buckets/assign", "organized", start)
    elif payload.text.strip() and user_id:
        body["message"] = ORGANIZE_FAILED_MESSAGE
        record_request("/buckets/assign", "unclassified", start)
    else:
        record_request("/buckets/assign", "ignored", start)
    return body


@router.post("/buckets")
async def create_empty_bucket(
    payload: BucketNameIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    return {"buckets": _dump(await backend.create_empty_bucket(user_id, payload.name))}


@router.patch("/buckets/{bucket_id}")
async def rename_bucket(
    bucket_id: str,
    payload: BucketNameIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    return {"buckets": _dump(await backend.rename_bucket(user_id, bucket_id, payload.name))}


@router.delete("/buckets/{bucket_id}")
async def delete_bucket(
    bucket_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    return {"buckets": _dump(await backend.delete_bucket(user_id, bucket_id))}
