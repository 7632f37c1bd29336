from __future__ import annotations

import pytest

from tests.fakes import FakeSession, FakeSessionFactory, InMemoryStore, install_fake_repos


@pytest.fixture
def store(monkeypatch) -> InMemoryStore:
    memory = InMemoryStore()
    install_fake_repos(monkeypatch, memory)
    return memory


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def session_factory() -> FakeSessionFactory:
    return FakeSessionFactory()
