from __future__ import annotations
import json
import re
from llm.providers.base import LLMProvider

_TASK_LINE = re.compile(r'^TASK: "(?P<task>.*)"$', re.MULTILINE)

# Keyword -> course bucket, for offline demos only.
_COURSES = {
    "apush": "APUSH",
    "history": "History",
    "math": "Mathematics",
    "calc": "Calculus",
    "english": "English",
    "essay": "English",
    "chem": "Chemistry",
    "bio": "Biology",
    "physics": "Physics",
    "cs": "Computer Science",
    "code": "Computer Science",
}


class MockProvider(LLMProvider):
    name = "mock"

    def generate(self, *, system: str, user: str, model: str | None = None) -> str:
        """
        Returns dummy JSON responses based on the prompt content.
        """
        match = _TASK_LINE.search(user)
        if not match:
            return "{}"

        task = match.group("task")
        lower_task = task.lower()

        bucket_name = "Others"
        for keyword, course in _COURSES.items():
            if re.search(rf"\b{keyword}", lower_task):
                bucket_name = course
                break

        if "meeting" in lower_task or "game" in lower_task or "practice" in lower_task:
            bucket_name = "Events"

        return json.dumps({
            "newBucketName": bucket_name,
            "parsedTask": {
                "assignmentName": task[:60],
                "courseCategory": bucket_name,
                "description": task,
            },
            "reason": "mock provider keyword match",
        })
