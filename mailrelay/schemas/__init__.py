"""
Pydantic Schemas

Data models shared by the intake, notification and web layers.
"""

from mailrelay.schemas.message import (
    MessageSnapshot,
    ExtractionResult,
)
from mailrelay.schemas.notification import (
    Notification,
    NotificationButton,
)
from mailrelay.schemas.common import (
    HealthResponse,
)

__all__ = [
    "MessageSnapshot",
    "ExtractionResult",
    "Notification",
    "NotificationButton",
    "HealthResponse",
]
