import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api import state
from api.backend import BackendAPI
from api.routers import buckets, calendar, ops, tasks, transcribe
from llm.providers.base import ProviderConfigurationError
from storage import db
from storage.bucket_store import PostgresBucketStore
from storage.memory_store import InMemoryBucketStore

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Task Buckets")

app.include_router(buckets.router)
app.include_router(tasks.router)
app.include_router(calendar.router)
app.include_router(transcribe.router)
app.include_router(ops.router)


@app.exception_handler(ProviderConfigurationError)
async def provider_not_configured(request: Request, exc: ProviderConfigurationError):
    logger.error(f"{request.url.path} failed, model provider not configured: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.on_event("startup")
async def startup() -> None:
    if db.DATABASE_URL:
        await db.init_db_pool()
        await db.init_schema()
        state.store = PostgresBucketStore()
        logger.info("Using PostgreSQL bucket store")
    else:
        state.store = InMemoryBucketStore()
        logger.warning("DATABASE_URL not set, using in-memory bucket store (data is not persisted)")

    state.backend = BackendAPI(store=state.store)


@app.on_event("shutdown")
async def shutdown() -> None:
    if db.DATABASE_URL:
        await db.close_db_pool()
