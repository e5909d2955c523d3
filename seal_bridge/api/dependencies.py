"""Shared API dependencies."""
from fastapi import Request

from seal_bridge.core.security import get_app_settings, require_bridge_bearer
from seal_bridge.integrations.seal import SealClient


def get_seal_client(request: Request) -> SealClient:
    return request.app.state.seal_client


__all__ = ["get_app_settings", "get_seal_client", "require_bridge_bearer"]
