from __future__ import annotations
import os
import httpx
from .base import LLMProvider, ProviderConfigurationError


class OpenAIProvider(LLMProvider):
    name = "openai"

    def __init__(self):
        self.api_key = os.getenv("OPENAI_API_KEY", "").strip()
        self.model = os.getenv("OPENAI_MODEL", "gpt-4o-mini").strip()
        self.transcribe_model = os.getenv(
            "OPENAI_TRANSCRIBE_MODEL", "gpt-4o-mini-transcribe"
        ).strip()
        self.base_url = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip()
        self.timeout_s = float(os.getenv("LLM_TIMEOUT_S", "30"))

    def ensure_configured(self) -> None:
        # Checked per call, not at startup: a missing key only breaks the AI-backed operations.
        if not self.api_key:
            raise ProviderConfigurationError("OPENAI_API_KEY is missing")

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.api_key}"}

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        self.ensure_configured()
        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": model or self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": 0,
            "response_format": {"type": "json_object"},
        }

        with httpx.Client(timeout=self.timeout_s) as client:
            r = client.post(url, headers=self._headers(), json=payload)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"] or "{}"

    def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        content_type: str = "application/octet-stream",
    ) -> str:
        """Speech-to-text for recorded task input. Errors propagate to the caller."""
        self.ensure_configured()
        url = f"{self.base_url}/audio/transcriptions"
        files = {"file": (filename, audio, content_type)}
        data = {"model": self.transcribe_model, "temperature": "0"}

        with httpx.Client(timeout=self.timeout_s) as client:
            r = client.post(url, headers=self._headers(), files=files, data=data)
            r.raise_for_status()
            body = r.json()

        return body["text"]
