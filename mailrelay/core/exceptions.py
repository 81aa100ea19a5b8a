"""
Custom Exceptions

Application-specific exceptions with proper error codes and messages.
"""

from typing import Optional, Any


class MailRelayException(Exception):
    """
    Base exception for all MailRelay errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: str = "internal_error",
        detail: Optional[Any] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.detail = detail
        super().__init__(self.message)


class MessageNotFoundException(MailRelayException):
    """
    Raised when a message is unknown or has expired.
    """

    def __init__(self, message_id: str, detail: Optional[Any] = None):
        super().__init__(
            message=f"Message not found or expired: {message_id}",
            status_code=404,
            error_code="message_not_found",
            detail=detail,
        )


class EmailParsingException(MailRelayException):
    """
    Raised when an inbound email cannot be turned into a snapshot.
    """

    def __init__(self, message: str = "Email parsing failed", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="email_parsing_error",
            detail=detail,
        )


class NotificationException(MailRelayException):
    """
    Raised when a notification cannot be delivered.
    """

    def __init__(self, message: str = "Notification delivery failed", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="notification_error",
            detail=detail,
        )


class ConfigurationException(MailRelayException):
    """
    Raised when the process cannot start with the given configuration.
    """

    def __init__(self, message: str = "Invalid configuration", detail: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=500,
            error_code="configuration_error",
            detail=detail,
        )
