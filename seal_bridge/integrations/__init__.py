"""External integration adapters."""

from .seal import SealClient, SealResponse

__all__ = [
    "SealClient",
    "SealResponse",
]
