"""
Notification Pydantic schemas.
"""

from typing import List

from pydantic import BaseModel, Field


class NotificationButton(BaseModel):
    """One inline button under the chat message."""

    label: str = Field(..., description="Button caption")
    url: str = Field(..., description="Target URL")
    web_app: bool = Field(False, description="Open inside the chat client as a web app")


class Notification(BaseModel):
    """Chat message announcing a received email."""

    text: str = Field(..., description="Message body in Telegram HTML parse mode")
    buttons: List[NotificationButton] = Field(default_factory=list, description="Inline buttons, one per row")
