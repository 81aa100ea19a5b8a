"""
Bot Module

Telegram application carrying the notification client and the commands.
"""

from mailrelay.bot.commands import build_bot_application

__all__ = [
    "build_bot_application",
]
