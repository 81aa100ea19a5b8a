"""
Health Check API Endpoints

Provides health and readiness endpoints for:
- Container health checks
- Load balancer health checks
- Monitoring systems
"""

from fastapi import APIRouter, Depends, status

from mailrelay import __version__
from mailrelay.config import Settings
from mailrelay.dependencies import get_app_settings, get_mail_store
from mailrelay.schemas.common import HealthResponse
from mailrelay.services.mail_store import MailStore

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health_check(
    store: MailStore = Depends(get_mail_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Report application status and the number of viewable messages.

    Returns:
        HealthResponse: Health status of all components
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.APP_ENV,
        components={
            "api": "healthy",
            "store": "healthy",
            "stored_messages": len(store),
        },
    )


@router.get(
    "/readiness",
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
)
async def readiness_check():
    """
    Check if application is ready to serve requests.

    Returns:
        dict: Readiness status
    """
    return {"status": "ready"}


@router.get(
    "/liveness",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
)
async def liveness_check():
    """
    Check if application is alive.

    Returns:
        dict: Liveness status
    """
    return {"status": "alive"}
