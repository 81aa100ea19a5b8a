"""
Process Runner

Starts every part of the relay on one event loop:
- Mail store and its expiry sweeper
- Telegram bot (notifications, optional command polling)
- SMTP intake
- Web server

Run with:
    python -m mailrelay
"""

import asyncio
import os
import sys
from typing import Optional

import uvicorn
from pydantic import ValidationError
from telegram.error import InvalidToken, TelegramError
from telegram.ext import Application

from mailrelay.bot.commands import build_bot_application
from mailrelay.config import Settings, get_settings
from mailrelay.core.exceptions import ConfigurationException
from mailrelay.core.logging import get_logger, setup_logging
from mailrelay.main import create_app
from mailrelay.services.mail_store import MailStore
from mailrelay.services.notifier import TelegramNotifier
from mailrelay.smtp.handler import MailIntakeHandler
from mailrelay.smtp.processor import EmailProcessor
from mailrelay.smtp.server import start_smtp_server

logger = get_logger(__name__)

BOT_RETRY_MAX_SECONDS = 300


def check_tls_files(settings: Settings):
    """
    Make sure configured certificate files can be read.

    Raises:
        ConfigurationException: If a configured file is missing or unreadable
    """
    if not settings.tls_enabled:
        return

    for label, path in (("certificate", settings.TLS_CERT_FILE), ("private key", settings.TLS_KEY_FILE)):
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            raise ConfigurationException(
                message=f"TLS {label} not readable: {path}",
                detail={"path": path},
            )


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict):
    """Log exceptions nobody awaited instead of letting them pass silently."""
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error(f"{message}: {str(exc)}", exc_info=exc)
    else:
        logger.error(message)


def build_web_server(app, settings: Settings) -> uvicorn.Server:
    config = uvicorn.Config(
        app,
        host=settings.WEB_HOST,
        port=settings.WEB_PORT,
        ssl_certfile=settings.TLS_CERT_FILE,
        ssl_keyfile=settings.TLS_KEY_FILE,
        log_config=None,  # Use our custom logging
    )
    return uvicorn.Server(config)


async def initialize_bot(
    application: Application,
    retry_seconds: float,
    max_attempts: Optional[int] = None,
) -> bool:
    """
    Initialize the Telegram bot, retrying while Telegram cannot be reached.

    The delay doubles after every failure, up to BOT_RETRY_MAX_SECONDS.

    Args:
        application: Bot application
        retry_seconds: First delay between attempts
        max_attempts: Give up after this many attempts; None retries forever

    Returns:
        bool: True once initialized, False if the attempts ran out

    Raises:
        ConfigurationException: If Telegram rejects the token
    """
    attempt = 0
    delay = retry_seconds
    while True:
        attempt += 1
        try:
            await application.initialize()
            logger.info("Telegram bot initialized")
            return True
        except InvalidToken as e:
            raise ConfigurationException(
                message=f"Telegram rejected the bot token: {str(e)}",
            ) from e
        except TelegramError as e:
            logger.warning(f"Telegram unreachable: {str(e)}", extra={"attempt": attempt})
            if max_attempts is not None and attempt >= max_attempts:
                return False

        await asyncio.sleep(delay)
        delay = min(delay * 2, BOT_RETRY_MAX_SECONDS)


async def start_bot(application: Application, settings: Settings, initialized: bool = False):
    """Finish bot startup in the background, then poll for commands if enabled."""
    if not initialized:
        logger.info("Telegram bot startup continues in the background")
        await initialize_bot(application, settings.BOT_RETRY_SECONDS)

    if settings.ENABLE_BOT_COMMANDS:
        await application.start()
        await application.updater.start_polling()
        logger.info("Telegram command polling started")


async def run(settings: Settings):
    """
    Run the relay until the web server is asked to stop.

    Args:
        settings: Application settings

    Raises:
        ConfigurationException: On a fatal startup problem
    """
    logger.info(f"Starting {settings.APP_NAME}")
    logger.info(f"Environment: {settings.APP_ENV}")
    logger.info(f"Domain: {settings.DOMAIN}")

    check_tls_files(settings)

    loop = asyncio.get_running_loop()
    loop.set_exception_handler(handle_loop_exception)

    store = MailStore(ttl_seconds=settings.mail_ttl_seconds)

    application = build_bot_application(settings)
    # A rejected token stops startup here; an outage is retried in the background
    initialized = await initialize_bot(application, settings.BOT_RETRY_SECONDS, max_attempts=1)

    notifier = TelegramNotifier(application.bot, settings.CHAT_ID)
    handler = MailIntakeHandler(EmailProcessor(store, notifier, settings))

    smtp_server: Optional[asyncio.AbstractServer] = None
    sweeper: Optional[asyncio.Task] = None
    bot_task: Optional[asyncio.Task] = None

    try:
        smtp_server = await start_smtp_server(handler, settings)
        sweeper = asyncio.create_task(store.run_sweeper(settings.SWEEP_INTERVAL_SECONDS))

        web_server = build_web_server(create_app(store, settings), settings)

        def stop_on_bot_failure(task: asyncio.Task):
            if not task.cancelled() and task.exception() is not None:
                web_server.should_exit = True

        bot_task = asyncio.create_task(start_bot(application, settings, initialized))
        bot_task.add_done_callback(stop_on_bot_failure)

        scheme = "https" if settings.tls_enabled else "http"
        logger.info(f"Web server listening on {scheme}://{settings.WEB_HOST}:{settings.WEB_PORT}")
        await web_server.serve()

        if bot_task.done() and not bot_task.cancelled() and bot_task.exception() is not None:
            raise bot_task.exception()

    finally:
        logger.info(f"Shutting down {settings.APP_NAME}")

        if sweeper is not None:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass

        if smtp_server is not None:
            smtp_server.close()
            await smtp_server.wait_closed()
            logger.info("SMTP server stopped")

        if bot_task is not None and not bot_task.done():
            bot_task.cancel()
            try:
                await bot_task
            except asyncio.CancelledError:
                pass

        try:
            if application.updater is not None and application.updater.running:
                await application.updater.stop()
            if application.running:
                await application.stop()
            await application.shutdown()
            logger.info("Telegram bot stopped")
        except Exception as e:
            logger.error(f"Shutdown error: {str(e)}", exc_info=True)


def main():
    """Console entry point."""
    try:
        settings = get_settings()
    except ValidationError as e:
        # Logging is not configured yet; report straight to stderr
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(settings)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except ConfigurationException as e:
        logger.critical(f"Startup failed: {e.message}")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"Relay crashed: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
