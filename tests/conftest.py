from __future__ import annotations

import json
from dataclasses import dataclass, field

import pytest
import requests


@dataclass(slots=True)
class FakeResponse:
    status_code: int = 200
    text: str = ""

    def json(self):
        return json.loads(self.text)


@dataclass(slots=True)
class FakeSession:
    """Replays canned outcomes in order and records every GET."""

    outcomes: list = field(default_factory=list)
    calls: list = field(default_factory=list)
    closed: bool = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


@pytest.fixture
def json_response():
    def _make(payload, status_code: int = 200) -> FakeResponse:
        return FakeResponse(status_code=status_code, text=json.dumps(payload))

    return _make


@pytest.fixture(autouse=True)
def _no_timeout_env(monkeypatch) -> None:
    monkeypatch.delenv("ISS_HTTP_TIMEOUT_SEC", raising=False)


@pytest.fixture
def make_session():
    def _make(*outcomes) -> FakeSession:
        return FakeSession(outcomes=list(outcomes))

    return _make


@pytest.fixture
def connection_error() -> requests.exceptions.ConnectionError:
    return requests.exceptions.ConnectionError("Name or service not known")


@pytest.fixture
def text_response():
    def _make(text: str, status_code: int = 200) -> FakeResponse:
        return FakeResponse(status_code=status_code, text=text)

    return _make
