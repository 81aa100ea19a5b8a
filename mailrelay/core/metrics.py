"""
Prometheus Metrics

Defines application metrics for monitoring:
- Request counters
- Duration histograms
- Gauge metrics
- Custom business metrics
"""

from prometheus_client import Counter, Histogram, Gauge, Info

from mailrelay import __version__


# ===================================
# HTTP Metrics
# ===================================

requests_total = Counter(
    "mailrelay_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
)

requests_duration = Histogram(
    "mailrelay_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

active_requests = Gauge(
    "mailrelay_active_requests",
    "Number of active HTTP requests",
)


# ===================================
# Store Metrics
# ===================================

messages_stored_total = Counter(
    "mailrelay_messages_stored_total",
    "Total number of messages stored",
)

messages_active = Gauge(
    "mailrelay_messages_active",
    "Number of messages currently stored",
)

messages_expired_total = Counter(
    "mailrelay_messages_expired_total",
    "Total number of messages removed after expiry",
)


# ===================================
# SMTP Metrics
# ===================================

smtp_messages_received = Counter(
    "mailrelay_smtp_messages_received",
    "Total number of messages received via SMTP",
    ["status"],  # accepted, dropped, error
)

smtp_processing_duration = Histogram(
    "mailrelay_smtp_processing_duration_seconds",
    "SMTP message processing duration in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
)

smtp_message_size_bytes = Histogram(
    "mailrelay_smtp_message_size_bytes",
    "Message size in bytes",
    buckets=[1024, 10240, 102400, 1024000, 10240000],  # 1KB to 10MB
)


# ===================================
# Notification Metrics
# ===================================

notifications_total = Counter(
    "mailrelay_notifications_total",
    "Total number of notifications attempted",
    ["status"],  # sent, failed
)

codes_detected_total = Counter(
    "mailrelay_codes_detected_total",
    "Total number of messages with a detected code",
)

links_detected_total = Counter(
    "mailrelay_links_detected_total",
    "Total number of messages with a detected link",
)


# ===================================
# Application Info
# ===================================

app_info = Info(
    "mailrelay_app",
    "Application information",
)

app_info.info({
    "version": __version__,
    "name": "MailRelay",
})


# ===================================
# Helper Functions
# ===================================

def record_request(method: str, endpoint: str, status: int, duration: float):
    """
    Record HTTP request metrics.

    Args:
        method: HTTP method
        endpoint: Endpoint path
        status: HTTP status code
        duration: Request duration in seconds
    """
    requests_total.labels(method=method, endpoint=endpoint, status=status).inc()
    requests_duration.labels(method=method, endpoint=endpoint).observe(duration)


def record_message_stored():
    """Record a message entering the store."""
    messages_stored_total.inc()
    messages_active.inc()


def record_messages_expired(count: int = 1):
    """Record messages leaving the store after expiry."""
    if count <= 0:
        return
    messages_expired_total.inc(count)
    messages_active.dec(count)


def record_smtp_message(status: str, duration: float, size_bytes: int = 0):
    """
    Record SMTP message processing.

    Args:
        status: Message status (accepted, dropped, error)
        duration: Processing duration in seconds
        size_bytes: Raw message size in bytes
    """
    smtp_messages_received.labels(status=status).inc()
    smtp_processing_duration.observe(duration)
    if size_bytes:
        smtp_message_size_bytes.observe(size_bytes)


def record_notification(status: str):
    """Record a notification attempt (sent or failed)."""
    notifications_total.labels(status=status).inc()


def record_extraction(has_code: bool, has_link: bool):
    if has_code:
        codes_detected_total.inc()
    if has_link:
        links_detected_total.inc()
