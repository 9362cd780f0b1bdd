"""
Shared fixtures: a stub provider and a TestClient wired to it.
"""

from typing import List, Union

import pytest
from fastapi.testclient import TestClient

from study_assistant.errors import ProviderError
from study_assistant.main import create_app


class StubGenerator:
    """Provider stand-in returning a canned reply (or raising) and recording prompts."""

    def __init__(self, reply: Union[str, Exception] = "") -> None:
        self.reply = reply
        self.prompts: List[str] = []
        self.configured = True

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        return self.reply


@pytest.fixture
def stub() -> StubGenerator:
    return StubGenerator()


@pytest.fixture
def client(stub: StubGenerator) -> TestClient:
    return TestClient(create_app(generator=stub))


@pytest.fixture
def provider_down() -> ProviderError:
    return ProviderError("Gemini request timed out: read timeout")


@pytest.fixture
def study_plan_payload() -> dict:
    return {
        "subjects": [
            {"name": "Cell Biology", "hours": 12, "priority": "High", "topics": ["Mitosis", "Organelles"]},
            {"name": "Genetics", "hours": 8, "priority": "Medium", "topics": ["Mendel"]},
        ],
        "weeklySchedule": [
            {"week": 1, "focus": "Learning", "dailyHours": 2, "topics": ["Cells"], "goals": ["Understand cells"]},
        ],
        "tips": ["Sleep well"],
        "keyTopics": ["Mitosis"],
    }


@pytest.fixture
def review_payload() -> dict:
    return {
        "overallScore": 88,
        "summary": "Clean and small.",
        "issues": [
            {"type": "style", "severity": "low", "line": 1, "message": "Missing semicolon", "suggestion": "Add it"}
        ],
        "suggestions": ["Name the function descriptively"],
        "positives": ["Concise"],
        "metrics": {"complexity": 90, "maintainability": 85, "readability": 80, "performance": 95, "security": 100},
    }
