"""
SMTP Module

SMTP server implementation for receiving emails.
"""

from mailrelay.smtp.server import start_smtp_server
from mailrelay.smtp.handler import MailIntakeHandler
from mailrelay.smtp.processor import EmailProcessor

__all__ = [
    "start_smtp_server",
    "MailIntakeHandler",
    "EmailProcessor",
]
