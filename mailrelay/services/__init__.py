"""
Services Module

Business logic layer for the application.
"""

from mailrelay.services.extraction import extract
from mailrelay.services.mail_store import MailStore
from mailrelay.services.notifier import TelegramNotifier, compose_notification

__all__ = [
    "extract",
    "MailStore",
    "TelegramNotifier",
    "compose_notification",
]
