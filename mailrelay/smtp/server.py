"""
SMTP Server

aiosmtpd protocol served from the process event loop, so the handler
shares the loop with the web server, the store and the Telegram client.
"""

import asyncio

from aiosmtpd.smtp import SMTP as SMTPProtocol

from mailrelay.config import Settings
from mailrelay.core.logging import get_logger
from mailrelay.smtp.handler import MailIntakeHandler

logger = get_logger(__name__)


def build_smtp_protocol(handler: MailIntakeHandler, settings: Settings) -> SMTPProtocol:
    """Create one SMTP protocol instance (one per connection)."""
    return SMTPProtocol(
        handler,
        hostname=settings.SMTP_HOSTNAME,
        data_size_limit=settings.max_message_size_bytes,
        enable_SMTPUTF8=True,  # Support international email addresses
    )


async def start_smtp_server(handler: MailIntakeHandler, settings: Settings) -> asyncio.AbstractServer:
    """
    Start listening for SMTP connections.

    Args:
        handler: Intake handler
        settings: Application settings

    Returns:
        asyncio.AbstractServer: Listening server, closed by the caller
    """
    loop = asyncio.get_running_loop()
    server = await loop.create_server(
        lambda: build_smtp_protocol(handler, settings),
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
    )
    logger.info(f"SMTP server started on {settings.SMTP_HOST}:{settings.SMTP_PORT}")
    logger.info(f"Hostname: {settings.SMTP_HOSTNAME}")
    return server
