import logging
from datetime import date
from typing import Optional

from pydantic import ValidationError

from llm.llm_client import LLMClient
from llm.prompts import SYSTEM_PROMPT, build_classification_prompt
from llm.providers.base import ProviderConfigurationError
from llm.schemas import AssignmentResult

logger = logging.getLogger(__name__)


class TaskClassifier:
    """Asks the model which bucket a task belongs to and what its fields are."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm = llm_client or LLMClient()

    def ensure_configured(self) -> None:
        self.llm.ensure_configured()

    def classify(self, task_text: str, buckets: list, current_date: date) -> Optional[AssignmentResult]:
        """
        Returns None when the model call fails or its output can't be read as a
        JSON object. Missing credentials are not swallowed.
        """
        prompt = build_classification_prompt(task_text, buckets, current_date)

        try:
            payload = self.llm.complete_json(system=SYSTEM_PROMPT, user=prompt)
        except ProviderConfigurationError:
            raise
        except Exception:
            logger.exception("Failed to classify task with the language model")
            return None

        if payload is None:
            logger.warning("Failed to parse classification response")
            return None

        try:
            return AssignmentResult.from_payload(payload)
        except ValidationError as e:
            logger.warning(f"Classification response did not match the expected shape: {e}")
            return None
