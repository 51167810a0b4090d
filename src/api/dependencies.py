import logging
from typing import Optional

from fastapi import Header

from api import state
from api.backend import BackendAPI
from llm.providers.openai_provider import OpenAIProvider
from storage.memory_store import InMemoryBucketStore

logger = logging.getLogger(__name__)


def get_backend() -> BackendAPI:
    # Startup wires the configured store; anything that skips startup
    # (e.g. a bare TestClient) gets an in-memory one.
    if state.backend is None:
        logger.warning("Backend not initialized at startup, using in-memory store")
        state.store = InMemoryBucketStore()
        state.backend = BackendAPI(store=state.store)
    return state.backend


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Opaque caller identity; blank means every operation is a no-op."""
    return (x_user_id or "").strip()


def get_transcriber() -> OpenAIProvider:
    return OpenAIProvider()
