"""
Core Module

Core functionality including:
- Logging (structured logging)
- Metrics (Prometheus)
- Exceptions (custom exceptions)
- Security (random identifiers)
"""

__all__ = [
    "security",
    "logging",
    "metrics",
    "exceptions",
]
