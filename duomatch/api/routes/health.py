from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text

from duomatch.core.config import get_settings
from duomatch.db.session import SessionLocal
from duomatch.workers.celery_app import celery_app

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)

READY_DEPENDENCIES = ("database", "redis")


def _failed(dependency: str, exc: BaseException | None = None, *, error: str | None = None) -> dict[str, str]:
    # Raw exception text can carry DSNs and passwords; only the type is logged.
    logger.warning(
        "health_check_failed",
        dependency=dependency,
        error_type=None if exc is None else type(exc).__name__,
        reason=error,
    )
    return {"status": "failed", "error": error or f"{dependency}_unavailable"}


async def _check_database() -> dict[str, Any]:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        return _failed("database", exc)
    return {"status": "ok"}


async def _check_redis() -> dict[str, Any]:
    redis_client = Redis.from_url(get_settings().redis_url)
    try:
        if await redis_client.ping() is not True:
            return _failed("redis", error="redis_unexpected_ping")
    except Exception as exc:
        return _failed("redis", exc)
    finally:
        await redis_client.aclose()
    return {"status": "ok"}


def _check_celery_worker_sync() -> dict[str, Any]:
    try:
        replies = celery_app.control.inspect(timeout=1.0).ping() or {}
    except Exception as exc:
        return _failed("celery", exc)
    if not replies:
        return _failed("celery", error="celery_no_workers")
    return {"status": "ok", "workers": len(replies)}


async def _check_celery_worker() -> dict[str, Any]:
    return await asyncio.to_thread(_check_celery_worker_sync)


async def _collect_checks(*, include_celery: bool = True) -> dict[str, dict[str, Any]]:
    pending = {"database": _check_database(), "redis": _check_redis()}
    if include_celery:
        pending["celery"] = _check_celery_worker()
    results = await asyncio.gather(*pending.values())
    return dict(zip(pending, results))


def _status_response(checks: dict[str, dict[str, Any]], *, ok: str, failed: str) -> JSONResponse:
    healthy = all(check.get("status") == "ok" for check in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": ok if healthy else failed, "checks": checks},
    )


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}


@router.get("/health")
async def health() -> JSONResponse:
    return _status_response(await _collect_checks(), ok="ok", failed="degraded")


@router.get("/ready")
async def ready() -> JSONResponse:
    # Celery workers are not required to serve swipes and chat.
    checks = await _collect_checks(include_celery=False)
    return _status_response(
        {name: checks[name] for name in READY_DEPENDENCIES},
        ok="ready",
        failed="not_ready",
    )
