"""
Dependency Injection

FastAPI dependencies giving routes access to the objects built at startup.
"""

from fastapi import Request

from mailrelay.config import Settings
from mailrelay.services.mail_store import MailStore


def get_mail_store(request: Request) -> MailStore:
    """
    Get the process-wide mail store.

    Returns:
        MailStore: Store attached to the application at creation
    """
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """
    Get the settings the application was created with.

    Returns:
        Settings: Application settings
    """
    return request.app.state.settings
