"""
Startup checks tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.error import InvalidToken, NetworkError, TimedOut

from mailrelay.config import Settings
from mailrelay.core.exceptions import ConfigurationException
from mailrelay.runner import check_tls_files, initialize_bot, main, start_bot


def _settings(**overrides) -> Settings:
    return Settings(
        DOMAIN="mail.example.test",
        BOT_TOKEN="123456:test-token",
        CHAT_ID="424242",
        _env_file=None,
        **overrides,
    )


class TestTlsCheck:

    def test_no_tls_configured(self):
        check_tls_files(_settings())

    def test_readable_files(self, tmp_path):
        cert = tmp_path / "cert.pem"
        key = tmp_path / "key.pem"
        cert.write_text("cert")
        key.write_text("key")

        check_tls_files(_settings(TLS_CERT_FILE=str(cert), TLS_KEY_FILE=str(key)))

    def test_missing_certificate_is_fatal(self, tmp_path):
        key = tmp_path / "key.pem"
        key.write_text("key")

        with pytest.raises(ConfigurationException) as exc_info:
            check_tls_files(_settings(TLS_CERT_FILE=str(tmp_path / "missing.pem"), TLS_KEY_FILE=str(key)))

        assert "certificate" in exc_info.value.message



def _application(*initialize_effects) -> MagicMock:
    application = MagicMock()
    application.initialize = AsyncMock(side_effect=list(initialize_effects))
    application.start = AsyncMock()
    application.updater.start_polling = AsyncMock()
    return application


class TestBotStartup:

    @pytest.mark.asyncio
    async def test_retries_until_telegram_reachable(self):
        application = _application(NetworkError("connection refused"), TimedOut(), None)

        assert await initialize_bot(application, retry_seconds=0) is True
        assert application.initialize.await_count == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        application = _application(NetworkError("connection refused"))

        assert await initialize_bot(application, retry_seconds=0, max_attempts=1) is False
        application.initialize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejected_token_is_fatal(self):
        application = _application(InvalidToken())

        with pytest.raises(ConfigurationException) as exc_info:
            await initialize_bot(application, retry_seconds=0)

        assert "token" in exc_info.value.message
        application.initialize.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_background_start_initializes_then_polls(self):
        application = _application(NetworkError("down"), None)
        settings = _settings(BOT_RETRY_SECONDS=0.01, ENABLE_BOT_COMMANDS=True)

        await start_bot(application, settings, initialized=False)

        assert application.initialize.await_count == 2
        application.updater.start_polling.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_background_start_without_commands_skips_polling(self):
        application = _application()
        settings = _settings(ENABLE_BOT_COMMANDS=False)

        await start_bot(application, settings, initialized=True)

        application.initialize.assert_not_awaited()
        application.start.assert_not_awaited()

class TestMain:

    def test_missing_certificate_exits_non_zero(self, tmp_path, monkeypatch):
        settings = _settings(
            TLS_CERT_FILE=str(tmp_path / "missing.pem"),
            TLS_KEY_FILE=str(tmp_path / "missing.key"),
            LOG_FORMAT="text",
        )
        monkeypatch.setattr("mailrelay.runner.get_settings", lambda: settings)

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
