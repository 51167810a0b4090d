import pytest

from llm.llm_client import LLMClient, extract_json_object, provider_from_env
from llm.providers.base import ProviderConfigurationError
from llm.providers.mock_provider import MockProvider
from llm.providers.openai_provider import OpenAIProvider


def test_complete_json(fake_provider_factory):
    provider = fake_provider_factory('{"newBucketName":"APUSH"}')
    client = LLMClient(provider=provider)
    assert client.complete_json(system="s", user="u") == {"newBucketName": "APUSH"}
    assert provider.calls == [{"system": "s", "user": "u"}]


def test_llm_extra_text_around_json(fake_provider_factory):
    provider = fake_provider_factory(
        'Sure! Here is the result: {"newBucketName":"English"} Thanks.'
    )
    client = LLMClient(provider=provider)
    assert client.complete_json(system="s", user="u") == {"newBucketName": "English"}


def test_llm_invalid_json_is_none(fake_provider_factory):
    client = LLMClient(provider=fake_provider_factory("INVALID OUTPUT"))
    assert client.complete_json(system="s", user="u") is None


def test_non_object_json_is_none():
    assert extract_json_object("[1, 2, 3]") is None
    assert extract_json_object('"text"') is None
    assert extract_json_object("") is None


def test_provider_from_env(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "mock")
    assert isinstance(provider_from_env(), MockProvider)
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    assert isinstance(provider_from_env(), OpenAIProvider)


def test_openai_missing_key_fails_only_when_used(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    provider = OpenAIProvider()  # construction is fine
    with pytest.raises(ProviderConfigurationError):
        provider.ensure_configured()
    with pytest.raises(ProviderConfigurationError):
        provider.generate(system="s", user="u")
    with pytest.raises(ProviderConfigurationError):
        LLMClient(provider=provider).ensure_configured()


def test_mock_provider_suggests_course_bucket():
    client = LLMClient(provider=MockProvider())
    out = client.complete_json(system="s", user='TASK: "Math worksheet due Friday"\n')
    assert out["newBucketName"] == "Mathematics"
    assert out["parsedTask"]["description"] == "Math worksheet due Friday"
