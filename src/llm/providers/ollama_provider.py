from __future__ import annotations
import os
import httpx
from .base import LLMProvider


class OllamaProvider(LLMProvider):
    """Local model server; needs no credentials, so configuration is never checked."""

    name = "ollama"

    def __init__(self):
        self.model = os.getenv("OLLAMA_MODEL", "llama3.1").strip()
        self.base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434").strip().rstrip("/")
        self.timeout_s = float(os.getenv("LLM_TIMEOUT_S", "60"))

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        body = {
            "model": model or self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            # Constrain the reply to a JSON document; classification parses it.
            "format": "json",
            "stream": False,
            "options": {"temperature": 0},
        }

        with httpx.Client(base_url=self.base_url, timeout=self.timeout_s) as client:
            resp = client.post("/api/chat", json=body)
            resp.raise_for_status()
            reply = resp.json()

        return reply.get("message", {}).get("content") or "{}"
