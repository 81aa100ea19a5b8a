"""
MailRelay - SMTP to Telegram relay for one-time codes

Receives mail on any address of a domain, detects one-time codes and
confirmation links, notifies a Telegram chat, and keeps the full message
viewable on the web for a short time.

License: MIT
Version: 1.0.0
"""

__version__ = "1.0.0"
__license__ = "MIT"

# Package metadata
__all__ = [
    "__version__",
    "__license__",
]
