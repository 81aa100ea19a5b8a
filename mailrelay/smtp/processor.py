"""
Email Processor

Turns a parsed email into a snapshot and runs the intake pipeline:
- Extract sender, recipient, subject and bodies
- Store the snapshot
- Detect code and link
- Notify the operator
"""

from email.message import EmailMessage
from typing import List, Optional, Tuple

from mailrelay.config import Settings, get_settings
from mailrelay.core.exceptions import EmailParsingException
from mailrelay.core.logging import get_logger
from mailrelay.core.metrics import record_extraction
from mailrelay.schemas.message import MessageSnapshot
from mailrelay.services.extraction import extract
from mailrelay.services.mail_store import MailStore
from mailrelay.services.notifier import TelegramNotifier, compose_notification
from mailrelay.services.sanitization import html_to_text

logger = get_logger(__name__)

UNKNOWN_SENDER = "Unknown"
NO_SUBJECT = "(no subject)"


class EmailProcessor:
    """
    Process incoming email messages.

    Owns no state of its own: the store and the notifier are shared with
    the rest of the process.
    """

    def __init__(
        self,
        store: MailStore,
        notifier: TelegramNotifier,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.notifier = notifier
        self.settings = settings or get_settings()

    def build_snapshot(
        self,
        message: EmailMessage,
        envelope_recipients: Optional[List[str]] = None,
    ) -> MessageSnapshot:
        """
        Capture the relevant fields of a parsed email.

        Args:
            message: Email parsed with the default policy
            envelope_recipients: RCPT TO addresses, used when there is no To header

        Returns:
            MessageSnapshot: Immutable snapshot

        Raises:
            EmailParsingException: If headers or bodies cannot be decoded
        """
        try:
            sender = self._extract_header(message, "From") or UNKNOWN_SENDER
            recipient = self._extract_header(message, "To")
            if not recipient and envelope_recipients:
                recipient = ", ".join(envelope_recipients)
            subject = self._extract_header(message, "Subject") or NO_SUBJECT
            html_body, text_body = self._extract_bodies(message)
            if text_body is None and html_body:
                # HTML-only mail: codes and links are read from its visible text
                text_body = html_to_text(html_body) or None
        except Exception as e:
            raise EmailParsingException(
                message=f"Could not read email: {str(e)}",
                detail={"error": type(e).__name__},
            ) from e

        return MessageSnapshot(
            sender=sender,
            recipient=recipient,
            subject=subject,
            text=text_body,
            html=html_body,
        )

    async def process(self, snapshot: MessageSnapshot) -> str:
        """
        Store a snapshot and notify the operator.

        Notification failures never propagate; the snapshot stays stored.

        Args:
            snapshot: Message snapshot

        Returns:
            str: Id of the stored message
        """
        message_id = self.store.put(snapshot)

        extraction = extract(snapshot.text)
        record_extraction(extraction.code is not None, extraction.link is not None)

        notification = compose_notification(
            snapshot,
            extraction,
            view_url=self.settings.view_url(message_id),
            preview_length=self.settings.PREVIEW_LENGTH,
        )
        await self.notifier.notify(notification)

        logger.info(
            f"Processed email {message_id} from {snapshot.sender}",
            extra={
                "message_id": message_id,
                "has_code": extraction.code is not None,
                "has_link": extraction.link is not None,
            },
        )
        return message_id

    def _extract_header(self, message: EmailMessage, name: str) -> Optional[str]:
        """Decoded header value, None if absent or blank."""
        value = message.get(name)
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def _extract_bodies(self, message: EmailMessage) -> Tuple[Optional[str], Optional[str]]:
        """
        Extract HTML and text bodies from email.

        Attachments are skipped; the first matching part of each type wins.

        Returns:
            tuple: (html_body, text_body)
        """
        html_part = message.get_body(preferencelist=("html",))
        text_part = message.get_body(preferencelist=("plain",))

        html_body = self._decode_part(html_part) if html_part is not None else None
        text_body = self._decode_part(text_part) if text_part is not None else None
        return html_body, text_body

    def _decode_part(self, part: EmailMessage) -> Optional[str]:
        """Decode a text part, replacing undecodable bytes."""
        try:
            return part.get_content()
        except (LookupError, UnicodeError):
            payload = part.get_payload(decode=True)
            if payload is None:
                return None
            return payload.decode("utf-8", errors="replace")
