"""
Shared fixtures for the concierge pipeline tests
"""

import asyncio
from types import SimpleNamespace

import pytest

from concierge_ai.config import settings
from concierge_ai.llm.intent_classifier import IntentClassifier, intent_classifier
from concierge_ai.schemas.context_schemas import WeatherCondition, WeatherData


class FakeCompletions:
    """Stands in for client.chat.completions; records every call"""

    def __init__(self, content="intent: specific\nreason: concrete search", error=None, delay=0.0):
        self.content = content
        self.error = error
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def make_weather(main="Clear", temperature=20.0, feels_like=19.5, **overrides):
    return WeatherData(
        temperature=temperature,
        feels_like=feels_like,
        humidity=overrides.pop("humidity", 55),
        condition=WeatherCondition(main=main, description=overrides.pop("description", main.lower())),
        **overrides
    )


@pytest.fixture(autouse=True)
def no_openai_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")


@pytest.fixture
def regex_classifier():
    return IntentClassifier(use_ai=False)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def regex_only_global(monkeypatch):
    """Force the shared classifier used by the API onto the regex strategy"""
    monkeypatch.setattr(intent_classifier, "use_ai", False)
    return intent_classifier
