"""
Common Pydantic schemas used across the application.
"""

from typing import Dict, Union

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Environment (development/production)")
    components: Dict[str, Union[str, int]] = Field(default_factory=dict, description="Component health status")
