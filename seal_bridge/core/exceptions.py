"""Custom exception types for the bridge, the proxy API and the Seal client."""
from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base app exception."""


class ConfigurationError(AppError):
    """Required configuration is missing, e.g. the Seal merchant token."""


class UpstreamError(AppError):
    """Seal answered with a non-2xx status where the caller cannot continue."""

    def __init__(self, message: str, *, status: int, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body


class TransportFault(AppError):
    """Seal could not be reached at all (DNS, connect, timeout)."""

    def __init__(self, message: str, *, url: str):
        super().__init__(message)
        self.url = url


class ValidationError(AppError):
    """Malformed proxy API input. The message is returned to the caller."""


class UnauthorizedError(AppError):
    """Proxy API request without the expected bearer secret."""
