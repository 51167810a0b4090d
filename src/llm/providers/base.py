from __future__ import annotations
from abc import ABC, abstractmethod


class ProviderConfigurationError(RuntimeError):
    """A required credential or setting for an external model service is missing."""


class LLMProvider(ABC):
    name: str = "llm"

    def ensure_configured(self) -> None:
        """Raise ProviderConfigurationError if this provider can't be called."""

    @abstractmethod
    def generate(self, *, system: str, user: str) -> str:
        """
        Must return the model output as TEXT (we'll parse/validate JSON in LLMClient).
        """
        raise NotImplementedError
