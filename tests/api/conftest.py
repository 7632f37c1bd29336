from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from duomatch.api.deps import get_realtime_channel
from duomatch.api.routes import chat, diamonds, feed, internal_diamonds, reports, swipes
from duomatch.chat.realtime import InMemoryRealtimeChannel
from duomatch.main import app
from tests.fakes import FakeSessionFactory

ROUTE_MODULES = (chat, diamonds, feed, internal_diamonds, reports, swipes)


@pytest.fixture
def realtime_channel() -> InMemoryRealtimeChannel:
    return InMemoryRealtimeChannel()


@pytest.fixture
def client(monkeypatch, store, realtime_channel):
    for module in ROUTE_MODULES:
        monkeypatch.setattr(module, "SessionLocal", FakeSessionFactory())
    app.dependency_overrides[get_realtime_channel] = lambda: realtime_channel
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_realtime_channel, None)
