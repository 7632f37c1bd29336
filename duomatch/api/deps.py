from __future__ import annotations

import structlog
from fastapi import Header, HTTPException, Request

from duomatch.chat.realtime import RedisRealtimeChannel
from duomatch.chat.session import RealtimeChannel
from duomatch.core.config import get_settings
from duomatch.services.internal_auth import (
    extract_client_ip,
    is_client_ip_allowed,
    is_internal_request_authenticated,
)

logger = structlog.get_logger(__name__)

USER_ID_HEADER = "X-User-Id"


def get_viewer_id(x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER)) -> str:
    viewer_id = (x_user_id or "").strip()
    if not viewer_id:
        raise HTTPException(status_code=401, detail={"code": "E_UNAUTHENTICATED"})
    return viewer_id


def get_realtime_channel(request: Request) -> RealtimeChannel:
    channel = getattr(request.app.state, "realtime_channel", None)
    if channel is None:
        channel = RedisRealtimeChannel.from_url(get_settings().redis_url)
        request.app.state.realtime_channel = channel
    return channel


def assert_internal_access(request: Request, *, scope: str) -> None:
    settings = get_settings()
    client_ip = extract_client_ip(request, trusted_proxies=settings.internal_api_trusted_proxies)

    if not is_internal_request_authenticated(request, expected_token=settings.internal_api_token):
        logger.warning("internal_auth_failed", scope=scope, reason="invalid_token", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})

    if not is_client_ip_allowed(client_ip=client_ip, allowlist=settings.internal_api_allowlist):
        logger.warning("internal_auth_failed", scope=scope, reason="ip_not_allowed", client_ip=client_ip)
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})
