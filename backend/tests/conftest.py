"""Shared test configuration, pytest markers and fixtures."""

import asyncio

import pytest

from config import settings
from models.cv_document import Contact, CVDocument
from services.ner.gazetteer import load_gazetteer
from services.pipeline.base import BaseExtractionStrategy


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls the real Gemini API (needs GEMINI_API_KEY)"
    )


class StubStrategy(BaseExtractionStrategy):
    """Strategy double that records calls and returns or raises on demand."""

    def __init__(self, name="ai", available=True, result=None, error=None, delay=0.0):
        self.strategy_name = name
        self.available = available
        self.result = result
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    def load(self) -> None:
        pass

    def is_available(self) -> bool:
        return self.available

    async def extract(self, text, language):
        self.calls.append((text, language))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result or CVDocument(contact=Contact(name="Stub"))


@pytest.fixture
def stub_strategy():
    """The StubStrategy class, for building strategy doubles inside tests."""
    return StubStrategy


@pytest.fixture(scope="session")
def gazetteer():
    """The shipped gazetteer, parsed once per test session."""
    return load_gazetteer(settings.gazetteer_path)


@pytest.fixture
def fixed_timestamp():
    return "2024-01-01T00:00:00+00:00"
