"""
Notification Service

Builds the chat message for a received email and delivers it to the
operator's Telegram chat.
"""

from typing import Optional

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, WebAppInfo
from telegram.constants import ParseMode
from telegram.error import TelegramError

from mailrelay.core.exceptions import NotificationException
from mailrelay.core.logging import get_logger
from mailrelay.core.metrics import record_notification
from mailrelay.schemas.message import ExtractionResult, MessageSnapshot
from mailrelay.schemas.notification import Notification, NotificationButton
from mailrelay.services.rendering import escape_html

logger = get_logger(__name__)

VIEW_BUTTON_LABEL = "👀 View full message"
LINK_BUTTON_LABEL = "🔗 Open link"

# Escaped lengths; together they stay well below Telegram's 4096 character limit
MAX_HEADER_LENGTH = 256
MAX_PREVIEW_LENGTH = 1000


def escape_within(value: Optional[str], limit: int) -> str:
    """Escape a value, cutting it so the escaped form fits in limit characters."""
    escaped = escape_html(value)
    if len(escaped) <= limit:
        return escaped

    cut = limit - 1
    while cut > 0:
        escaped = escape_html(value[:cut])
        overflow = len(escaped) + 1 - limit
        if overflow <= 0:
            break
        # An escaped character is at most five characters long
        cut -= max(1, -(-overflow // 5))
    else:
        escaped = ""
    return escaped + "…"


def compose_notification(
    snapshot: MessageSnapshot,
    extraction: ExtractionResult,
    view_url: str,
    preview_length: int = 100,
) -> Notification:
    """
    Compose the notification for a stored message.

    Header fields and the preview are escaped and cut to a bounded
    length; the code sits in a <code>
    block and is inserted verbatim, as is the link button URL.

    Args:
        snapshot: Stored message
        extraction: Code and link found in the text body
        view_url: Public URL of the web view for this message
        preview_length: Characters of text shown when no code was found

    Returns:
        Notification: Text and inline buttons
    """
    lines = [
        "📧 <b>New mail</b>",
        f"👤 <b>From:</b> {escape_within(snapshot.sender, MAX_HEADER_LENGTH)}",
    ]
    if snapshot.recipient:
        lines.append(f"📥 <b>To:</b> {escape_within(snapshot.recipient, MAX_HEADER_LENGTH)}")
    lines.append(f"📝 <b>Subject:</b> {escape_within(snapshot.subject, MAX_HEADER_LENGTH)}")

    text = "\n".join(lines)

    if extraction.code:
        text += f"\n\n🔑 <b>Code detected:</b>\n<code>{extraction.code}</code>\n(tap to copy)"
    elif snapshot.text and preview_length > 0:
        preview = snapshot.text.strip()[:preview_length]
        if preview:
            text += f"\n\n<i>{escape_within(preview, MAX_PREVIEW_LENGTH)}...</i>"

    buttons = [NotificationButton(label=VIEW_BUTTON_LABEL, url=view_url, web_app=True)]
    if extraction.link:
        buttons.append(NotificationButton(label=LINK_BUTTON_LABEL, url=extraction.link))

    return Notification(text=text, buttons=buttons)


def build_reply_markup(notification: Notification) -> Optional[InlineKeyboardMarkup]:
    """One button per keyboard row."""
    if not notification.buttons:
        return None

    rows = []
    for button in notification.buttons:
        if button.web_app:
            rows.append([InlineKeyboardButton(button.label, web_app=WebAppInfo(url=button.url))])
        else:
            rows.append([InlineKeyboardButton(button.label, url=button.url)])
    return InlineKeyboardMarkup(rows)


class TelegramNotifier:
    """Deliver notifications to a single fixed chat."""

    def __init__(self, bot: Bot, chat_id: str):
        self.bot = bot
        self.chat_id = chat_id

    async def send(self, notification: Notification):
        """
        Send a notification.

        Raises:
            NotificationException: If the Bot API call fails
        """
        try:
            await self.bot.send_message(
                chat_id=self.chat_id,
                text=notification.text,
                parse_mode=ParseMode.HTML,
                reply_markup=build_reply_markup(notification),
            )
        except TelegramError as e:
            raise NotificationException(
                message=f"Telegram rejected the notification: {str(e)}",
                detail={"chat_id": self.chat_id},
            ) from e

    async def notify(self, notification: Notification) -> bool:
        """
        Send a notification, logging and swallowing any failure.

        Returns:
            bool: True if delivered
        """
        try:
            await self.send(notification)
        except NotificationException as e:
            logger.error(e.message, extra={"error_code": e.error_code})
            record_notification("failed")
            return False
        except Exception as e:
            logger.error(f"Notification delivery failed: {str(e)}", exc_info=True)
            record_notification("failed")
            return False

        record_notification("sent")
        logger.info(f"Notification sent to chat {self.chat_id}")
        return True
