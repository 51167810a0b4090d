import asyncio
from datetime import datetime, timedelta

import pytest

from api.backend import BackendAPI
from classification.task_classifier import TaskClassifier
from llm.llm_client import LLMClient
from storage.memory_store import InMemoryBucketStore

NOW = datetime(2024, 11, 15, 9, 0)


class FakeProvider:
    def __init__(self, response_text: str):
        self._response_text = response_text
        self.calls = []

    def generate(self, *, system: str, user: str) -> str:
        self.calls.append({"system": system, "user": user})
        return self._response_text


class FailingProvider:
    def __init__(self, exc: Exception):
        self._exc = exc
        self.calls = 0

    def generate(self, *, system: str, user: str) -> str:
        self.calls += 1
        raise self._exc


class TickingClock:
    """Each call is one second after the previous one, so creation order is unambiguous."""

    def __init__(self, start: datetime = NOW):
        self._current = start

    def __call__(self) -> datetime:
        value = self._current
        self._current = value + timedelta(seconds=1)
        return value


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def store():
    return InMemoryBucketStore(clock=TickingClock())


@pytest.fixture
def backend_factory(store):
    def _make(provider):
        classifier = TaskClassifier(llm_client=LLMClient(provider=provider))
        return BackendAPI(store=store, classifier=classifier, clock=lambda: NOW)
    return _make
