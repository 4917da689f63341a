# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from hintgate.config import Settings
from hintgate.main import create_app
from hintgate.utils.security import generate_signature

TEST_SECRET = "test-app-secret"
START_TIME = 1_781_000_000.0  # mid-June 2026, well away from DST switches

GOOD_COMPLETION = """Here are your hints:
1. You share it with friends on a Friday night
2. Round Italian dish topped with cheese and sauce
3. Starts with P, five letters, baked in ovens
4. P _ Z Z _ is often delivered hot
"""


class FakeClock:
    """Manually advanced wall clock (epoch seconds)."""

    def __init__(self, start: float = START_TIME) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def now_ms(self) -> int:
        return int(self.now * 1000)


class FakeGenerator:
    """Stands in for an LLM provider. Returns canned text or raises."""

    name = "fake"

    def __init__(self, content: str = GOOD_COMPLETION, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def complete(self, system_prompt: str, user_prompt: str, max_tokens: int, temperature: float) -> str:
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return self.content


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "APP_SECRET": TEST_SECRET,
        "AUTH_MODE": "signature",
        "GROQ_API_KEY": None,
        "GEMINI_API_KEY": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def client(settings: Settings, generator: FakeGenerator, clock: FakeClock) -> Iterator[TestClient]:
    app = create_app(settings, generators=[generator], clock=clock)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def signed_headers(clock: FakeClock) -> Callable[..., dict[str, str]]:
    """Builds valid signature-mode headers for a word/topic at the fake clock's time."""

    def _build(word: str, topic: str, timestamp: int | None = None, secret: str = TEST_SECRET) -> dict[str, str]:
        ts = str(clock.now_ms() if timestamp is None else timestamp)
        return {
            "X-App-Secret": TEST_SECRET,
            "X-Signature": generate_signature(word, topic, ts, secret),
            "X-Timestamp": ts,
        }

    return _build
