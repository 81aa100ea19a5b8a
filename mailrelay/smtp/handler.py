"""
SMTP Handler

Handles incoming SMTP connections and email reception.
"""

import time
from email import policy
from email.parser import BytesParser

from aiosmtpd.smtp import Envelope, Session, SMTP as SMTPProtocol

from mailrelay.core.exceptions import EmailParsingException
from mailrelay.core.logging import get_logger
from mailrelay.core.metrics import record_smtp_message
from mailrelay.smtp.processor import EmailProcessor

logger = get_logger(__name__)

ACCEPTED = "250 Message accepted for delivery"


class MailIntakeHandler:
    """
    SMTP handler accepting mail for any recipient without authentication.

    Every transaction that reaches DATA is acknowledged with 250, even when
    the message is dropped, so that sending relays do not retry.
    """

    def __init__(self, processor: EmailProcessor):
        self.processor = processor

    async def handle_RCPT(
        self,
        server: SMTPProtocol,
        session: Session,
        envelope: Envelope,
        address: str,
        rcpt_options: list,
    ) -> str:
        """Accept every recipient."""
        envelope.rcpt_tos.append(address)
        return "250 OK"

    async def handle_DATA(self, server: SMTPProtocol, session: Session, envelope: Envelope) -> str:
        """
        Handle incoming email data.

        Args:
            server: SMTP server instance
            session: SMTP session
            envelope: Email envelope with recipients and data

        Returns:
            str: SMTP response code and message
        """
        start_time = time.time()
        content = envelope.content or b""
        if isinstance(content, str):
            content = content.encode("utf-8", errors="replace")

        try:
            try:
                message = BytesParser(policy=policy.default).parsebytes(content)
                snapshot = self.processor.build_snapshot(message, list(envelope.rcpt_tos))
            except EmailParsingException as e:
                logger.warning(f"Email dropped: {e.message}", extra={"mail_from": envelope.mail_from})
                record_smtp_message("dropped", time.time() - start_time, len(content))
                return ACCEPTED
            except Exception as e:
                logger.warning(f"Email dropped: parsing failed: {str(e)}", extra={"mail_from": envelope.mail_from})
                record_smtp_message("dropped", time.time() - start_time, len(content))
                return ACCEPTED

            await self.processor.process(snapshot)

        except Exception as e:
            logger.error(f"Unexpected error in SMTP handler: {str(e)}", exc_info=True)
            record_smtp_message("error", time.time() - start_time, len(content))
            return ACCEPTED

        duration = time.time() - start_time
        record_smtp_message("accepted", duration, len(content))
        logger.info(f"Email accepted from {envelope.mail_from} ({len(content)} bytes, {duration:.2f}s)")
        return ACCEPTED
