"""
Shared fixtures.

Required settings are provided through the environment before any
mailrelay module is imported.
"""

import os

os.environ.setdefault("DOMAIN", "mail.example.test")
os.environ.setdefault("BOT_TOKEN", "123456:test-token")
os.environ.setdefault("CHAT_ID", "424242")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from mailrelay.config import Settings
from mailrelay.main import create_app
from mailrelay.services.mail_store import MailStore
from mailrelay.services.notifier import TelegramNotifier
from mailrelay.smtp.processor import EmailProcessor


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def settings() -> Settings:
    return Settings(
        DOMAIN="mail.example.test",
        BOT_TOKEN="123456:test-token",
        CHAT_ID="424242",
        APP_ENV="development",
        LOG_FORMAT="text",
        _env_file=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> MailStore:
    return MailStore(ttl_seconds=15 * 60, clock=clock)


@pytest.fixture
def bot() -> MagicMock:
    mock_bot = MagicMock()
    mock_bot.send_message = AsyncMock()
    return mock_bot


@pytest.fixture
def notifier(bot, settings) -> TelegramNotifier:
    return TelegramNotifier(bot, settings.CHAT_ID)


@pytest.fixture
def processor(store, notifier, settings) -> EmailProcessor:
    return EmailProcessor(store, notifier, settings)


@pytest.fixture
def client(store, settings):
    app = create_app(store, settings)
    with TestClient(app) as test_client:
        yield test_client
