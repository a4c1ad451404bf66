"""Pytest configuration and fixtures."""

import json
from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from studycompanion.config import Settings
from studycompanion.main import create_app
from studycompanion.services.ai_service import AIService
from studycompanion.services.blob_storage import LocalBlobStorage
from studycompanion.store import MemoryRecordStore, ensure_default_user


class FakeMessages:
    """Stands in for ``AsyncAnthropic().messages``; replies are queued per test."""

    def __init__(self) -> None:
        self.replies: list = []
        self.calls: list[dict] = []

    def queue(self, reply) -> None:
        """Queue a reply: a string, a dict (sent as JSON) or an exception to raise."""
        self.replies.append(reply)

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if self.replies else "Keep going, you're doing well."
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=reply)])


class FakeAnthropic:
    def __init__(self) -> None:
        self.messages = FakeMessages()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="development",
        seed_sample_units=False,
        upload_dir=str(tmp_path / "uploads"),
        anthropic_api_key="test-key",
    )


@pytest.fixture
def fake_llm() -> FakeAnthropic:
    return FakeAnthropic()


@pytest.fixture
def ai_service(settings: Settings, fake_llm: FakeAnthropic) -> AIService:
    return AIService(settings, client=fake_llm)


@pytest.fixture
async def store(settings: Settings) -> MemoryRecordStore:
    store = MemoryRecordStore()
    await ensure_default_user(store, settings)
    return store


@pytest.fixture
async def user(store: MemoryRecordStore, settings: Settings):
    return await store.get_user_by_username(settings.default_username)


@pytest.fixture
def app(settings: Settings, store: MemoryRecordStore, ai_service: AIService):
    return create_app(
        settings=settings,
        store=store,
        ai_service=ai_service,
        blob_storage=LocalBlobStorage(settings.upload_dir),
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
