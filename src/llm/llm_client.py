import json
import logging
import os
from typing import Any, Optional

from llm.providers.base import LLMProvider

logger = logging.getLogger(__name__)


def provider_from_env() -> LLMProvider:
    """Pick the concrete provider from LLM_PROVIDER (openai | ollama | mock)."""
    name = os.getenv("LLM_PROVIDER", "openai").strip().lower()

    if name == "ollama":
        from llm.providers.ollama_provider import OllamaProvider

        return OllamaProvider()
    if name == "mock":
        from llm.providers.mock_provider import MockProvider

        return MockProvider()

    from llm.providers.openai_provider import OpenAIProvider

    return OpenAIProvider()


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """
    Parse model output as a JSON object.

    Tolerates prose around the object (first '{' .. last '}'). Returns None if
    nothing parses or the document isn't an object.
    """
    if not text:
        return None

    candidates = [text.strip()]
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(data, dict):
            return data
    return None


class LLMClient:
    """Thin wrapper over a provider: one chat call in, one JSON object (or None) out."""

    def __init__(self, provider: Optional[LLMProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> LLMProvider:
        if self._provider is None:
            self._provider = provider_from_env()
        return self._provider

    def ensure_configured(self) -> None:
        ensure = getattr(self.provider, "ensure_configured", None)
        if ensure is not None:
            ensure()

    def complete(self, *, system: str, user: str) -> str:
        return self.provider.generate(system=system, user=user)

    def complete_json(self, *, system: str, user: str) -> Optional[dict[str, Any]]:
        text = self.complete(system=system, user=user)
        data = extract_json_object(text)
        if data is None:
            logger.warning(f"Model returned non-JSON output: {text[:80]!r}")
        return data
