import httpx
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_backend, get_transcriber
from api.main import app
from llm.providers.base import ProviderConfigurationError

APUSH_RESPONSE = (
    '{"newBucketName":"APUSH","parsedTask":{"assignmentName":"Chapter 5 Reading",'
    '"typeTag":"Homework","dueDate":"2024-11-18"}}'
)
USER = {"X-User-Id": "u1"}


@pytest.fixture
def client_factory(backend_factory):
    def _make(provider):
        backend = backend_factory(provider)
        app.dependency_overrides[get_backend] = lambda: backend
        return TestClient(app)
    yield _make
    app.dependency_overrides.clear()


def test_assign_end_to_end(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory(APUSH_RESPONSE))

    r = client.post("/buckets/assign", json={"text": "APUSH reading chapter 5 due Monday"}, headers=USER)

    assert r.status_code == 200
    body = r.json()
    assert body["organized"] is True
    assert body["bucket_created"] is True
    assert body["task"]["type_tag"] == "Homework"
    assert [b["name"] for b in body["buckets"]] == ["Events", "APUSH"]
    item = body["buckets"][1]["items"][0]
    assert item["assignment_name"] == "Chapter 5 Reading"
    assert item["due_date"] == "2024-11-18"
    assert item["due_time"] is None


def test_assign_failure_message(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory("garbage"))
    body = client.post("/buckets/assign", json={"text": "buy milk"}, headers=USER).json()
    assert body["organized"] is False
    assert body["message"] == "Couldn't organize this task."
    assert [b["name"] for b in body["buckets"]] == ["Events"]


def test_assign_without_user_is_ignored(client_factory, fake_provider_factory):
    provider = fake_provider_factory(APUSH_RESPONSE)
    client = client_factory(provider)
    body = client.post("/buckets/assign", json={"text": "read"}).json()
    assert body == {"organized": False, "buckets": []}
    assert provider.calls == []


def test_assign_unconfigured_provider_is_500(client_factory):
    class Unconfigured:
        def ensure_configured(self):
            raise ProviderConfigurationError("OPENAI_API_KEY is missing")

        def generate(self, *, system, user):
            raise AssertionError("should not be called")

    client = client_factory(Unconfigured())
    r = client.post("/buckets/assign", json={"text": "read"}, headers=USER)
    assert r.status_code == 500
    assert r.json() == {"detail": "OPENAI_API_KEY is missing"}


def test_bucket_crud(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory("{}"))

    buckets = client.get("/buckets", headers=USER).json()["buckets"]
    assert [b["name"] for b in buckets] == ["Events"]

    buckets = client.post("/buckets", json={"name": "Chemistry"}, headers=USER).json()["buckets"]
    chem_id = buckets[1]["id"]

    buckets = client.patch(f"/buckets/{chem_id}", json={"name": "AP Chem"}, headers=USER).json()["buckets"]
    assert [b["name"] for b in buckets] == ["Events", "AP Chem"]

    buckets = client.delete(f"/buckets/{buckets[0]['id']}", headers=USER).json()["buckets"]
    assert [b["name"] for b in buckets] == ["Events", "AP Chem"]

    buckets = client.delete(f"/buckets/{chem_id}", headers=USER).json()["buckets"]
    assert [b["name"] for b in buckets] == ["Events"]


def test_task_and_calendar_routes(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory(APUSH_RESPONSE))
    body = client.post("/buckets/assign", json={"text": "APUSH reading chapter 5"}, headers=USER).json()
    task_id = body["task"]["id"]
    events_id = body["buckets"][0]["id"]

    task = client.get(f"/tasks/{task_id}", headers=USER).json()["task"]
    assert task["bucket_name"] == "APUSH"

    assert client.get(f"/tasks/{task_id}", headers={"X-User-Id": "u2"}).status_code == 404

    calendar = client.patch(
        f"/tasks/{task_id}", json={"due_date": "2024-11-19", "due_time": "14:00"}, headers=USER
    ).json()["calendar"]
    assert calendar["2024-11-19"][0]["due_time"] == "14:00"

    buckets = client.post(f"/tasks/{task_id}/move", json={"bucket_id": events_id}, headers=USER).json()["buckets"]
    assert [i["id"] for i in buckets[0]["items"]] == [task_id]

    calendar = client.get("/calendar", headers=USER).json()["calendar"]
    assert list(calendar) == ["2024-11-19"]

    calendar = client.delete(f"/calendar/tasks/{task_id}", headers=USER).json()["calendar"]
    assert calendar == {}


def test_complete_task_route(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory(APUSH_RESPONSE))
    task_id = client.post("/buckets/assign", json={"text": "APUSH reading"}, headers=USER).json()["task"]["id"]
    buckets = client.post(f"/tasks/{task_id}/complete", headers=USER).json()["buckets"]
    assert all(b["items"] == [] for b in buckets)


class FakeTranscriber:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc

    def ensure_configured(self):
        pass

    def transcribe(self, audio, filename, content_type):
        if self.exc:
            raise self.exc
        return self.text


def test_transcribe(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory("{}"))
    app.dependency_overrides[get_transcriber] = lambda: FakeTranscriber(text="bio lab friday")

    r = client.post("/transcribe", files={"audio": ("clip.webm", b"\x00\x01", "audio/webm")})
    assert r.status_code == 200
    assert r.json() == {"text": "bio lab friday"}

    assert client.post("/transcribe").status_code == 400


def test_transcribe_failure_propagates(client_factory, fake_provider_factory):
    client = client_factory(fake_provider_factory("{}"))
    app.dependency_overrides[get_transcriber] = lambda: FakeTranscriber(
        exc=httpx.HTTPStatusError("bad", request=httpx.Request("POST", "http://x"), response=httpx.Response(500))
    )
    r = client.post("/transcribe", files={"audio": ("clip.webm", b"\x00", "audio/webm")})
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to transcribe audio."}
