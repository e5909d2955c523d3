"""Bearer-secret guard for the proxy API."""
from __future__ import annotations

import hmac

from fastapi import Depends, Request

from seal_bridge.config import Settings
from seal_bridge.core.exceptions import UnauthorizedError


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_bridge_bearer(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject the request unless ``Authorization`` is exactly ``Bearer <BRIDGE_BEARER>``.

    An unset secret rejects everything rather than opening the proxy.
    """
    secret = settings.bridge_bearer_value()
    provided = request.headers.get("authorization") or ""
    if not secret:
        raise UnauthorizedError("BRIDGE_BEARER is not configured")
    expected = f"Bearer {secret}"
    if not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise UnauthorizedError("Invalid bearer credential")
