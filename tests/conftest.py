"""Shared fixtures for the TTS adapter tests."""

import pytest

from ttsbridge.config import reset_config
from ttsbridge.transport import TransportResponse


class FakeTransport:
    """Transport double that records requests and replays a canned response."""

    def __init__(self, response=None):
        self.response = response or TransportResponse(ok=True, status=200, data=b"ID3audio")
        self.calls = []

    async def fetch(self, url, *, method="POST", headers=None, body=None, response_type=None):
        self.calls.append({
            "url": url,
            "method": method,
            "headers": dict(headers or {}),
            "body": body,
            "response_type": response_type,
        })
        return self.response

    @property
    def last_call(self):
        return self.calls[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def failing_transport():
    def _make(status, data):
        return FakeTransport(TransportResponse(ok=False, status=status, data=data))
    return _make


@pytest.fixture(autouse=True)
def clean_config():
    reset_config()
    yield
    reset_config()
