"""
FastAPI Application

Web side of the relay:
- Message view pages
- Status and health endpoints
- Security headers
- Error handling
- Metrics collection
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from mailrelay import __version__
from mailrelay.api.router import api_router
from mailrelay.config import Settings, get_settings
from mailrelay.core.exceptions import MailRelayException, MessageNotFoundException
from mailrelay.core.logging import get_logger
from mailrelay.core.metrics import active_requests, record_request
from mailrelay.services.mail_store import MailStore
from mailrelay.services.rendering import (
    render_expired_page,
    render_simple_page,
    render_status_page,
)

logger = get_logger(__name__)


def create_app(store: MailStore, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the web application around an existing mail store.

    Args:
        store: Store shared with the SMTP intake
        settings: Application settings

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        logger.info("Web server starting")
        logger.info(f"Environment: {settings.APP_ENV}")
        logger.info(f"Public URL: {settings.public_base_url}")
        yield
        logger.info("Web server stopped")

    app = FastAPI(
        title=f"{settings.APP_NAME}",
        description="Short-lived web view of relayed email",
        version=__version__,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.settings = settings

    # ===================================
    # Request/Response Middleware
    # ===================================

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        """
        Add security headers to all responses.

        Framing stays allowed: the view page opens inside the Telegram
        Web App container.
        """
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "no-referrer"

        if settings.is_production and settings.tls_enabled:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """
        Collect Prometheus metrics for all requests.

        Paths are labelled by route template so message ids do not
        multiply label values.
        """
        method = request.method
        active_requests.inc()
        start_time = time.time()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            route = request.scope.get("route")
            endpoint = getattr(route, "path", None) or "unmatched"
            record_request(method, endpoint, status_code, time.time() - start_time)
            active_requests.dec()

        return response

    # ===================================
    # Exception Handlers
    # ===================================

    @app.exception_handler(MessageNotFoundException)
    async def message_not_found_handler(request: Request, exc: MessageNotFoundException):
        """
        Answer unknown or expired ids with the expired page.
        """
        logger.info(
            exc.message,
            extra={"error_code": exc.error_code, "path": request.url.path},
        )
        return HTMLResponse(content=render_expired_page(), status_code=exc.status_code)

    @app.exception_handler(MailRelayException)
    async def mailrelay_exception_handler(request: Request, exc: MailRelayException):
        """
        Handle custom MailRelay exceptions.
        """
        logger.warning(
            f"MailRelay exception: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return HTMLResponse(
            content=render_simple_page("Error", exc.message),
            status_code=exc.status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Handle HTTP exceptions.
        """
        logger.warning(
            f"HTTP exception: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return HTMLResponse(
            content=render_simple_page("Error", str(exc.detail)),
            status_code=exc.status_code,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.
        """
        logger.error(
            f"Unexpected exception: {str(exc)}",
            exc_info=True,
            extra={
                "path": request.url.path,
                "method": request.method,
            },
        )

        # Don't expose internal errors in production
        if settings.is_production:
            message = "Internal server error"
        else:
            message = str(exc)

        return HTMLResponse(
            content=render_simple_page("Error", message),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    # ===================================
    # Routes
    # ===================================

    app.include_router(api_router)

    # Mount Prometheus metrics
    if settings.ENABLE_METRICS:
        app.mount("/metrics", make_asgi_app())
        logger.info("Prometheus metrics enabled at /metrics")

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def root():
        """
        Serve the status page.
        """
        return HTMLResponse(content=render_status_page(settings.APP_NAME, settings.DOMAIN))

    return app
