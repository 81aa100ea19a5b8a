"""
Telegram Bot Commands

- /start: welcome message with the receiving domain
- /new: random disposable address on that domain
"""

from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import Application, ApplicationBuilder, CommandHandler, ContextTypes

from mailrelay.config import Settings
from mailrelay.core.logging import get_logger
from mailrelay.core.security import generate_alias_address
from mailrelay.services.rendering import escape_html

logger = get_logger(__name__)

SETTINGS_KEY = "settings"


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Greet the user and point at /new."""
    settings: Settings = context.bot_data[SETTINGS_KEY]
    await update.message.reply_text(
        "Welcome 👋\n"
        f"Your domain is: {settings.DOMAIN}\n"
        "Any address on it reaches you. Use /new to generate one."
    )


async def new_address_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Reply with a fresh random address, formatted for one-tap copy."""
    settings: Settings = context.bot_data[SETTINGS_KEY]
    address = generate_alias_address(settings.DOMAIN, length=settings.ALIAS_LENGTH)
    logger.info("Generated disposable address", extra={"chat_id": update.effective_chat.id})
    await update.message.reply_text(
        f"📧 Your disposable address:\n\n<code>{escape_html(address)}</code>",
        parse_mode=ParseMode.HTML,
    )


def build_bot_application(settings: Settings) -> Application:
    """
    Build the Telegram application.

    Its bot is also the notification client, so commands and
    notifications share one connection pool.

    Args:
        settings: Application settings

    Returns:
        Application: Not yet initialized
    """
    application = ApplicationBuilder().token(settings.BOT_TOKEN).build()
    application.bot_data[SETTINGS_KEY] = settings
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("new", new_address_command))
    return application
