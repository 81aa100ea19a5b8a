"""
Message-related Pydantic schemas.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageSnapshot(BaseModel):
    """Immutable copy of the relevant fields of one received email."""

    model_config = ConfigDict(frozen=True)

    sender: str = Field(..., description="Sender display string")
    recipient: Optional[str] = Field(None, description="Recipient display string")
    subject: str = Field(..., description="Email subject")
    text: Optional[str] = Field(None, description="Plain text body, derived from the HTML when the mail has none")
    html: Optional[str] = Field(None, description="HTML body, rendered as-is")
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Intake timestamp",
    )


class ExtractionResult(BaseModel):
    """Code and actionable link found in a plain text body."""

    model_config = ConfigDict(frozen=True)

    code: Optional[str] = Field(None, description="First 4-8 digit run")
    link: Optional[str] = Field(None, description="Preferred actionable URL")
