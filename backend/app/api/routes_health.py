import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy import select, text

from app.domain.pricing_settings.db_models import PricingSettings

router = APIRouter()
logger = logging.getLogger(__name__)

_CHECK_TIMEOUT_SECONDS = 2.0

CheckResult = tuple[bool, dict[str, Any]]


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.head("/healthz")
async def healthz_head() -> Response:
    return Response(status_code=200)


async def _with_session(request: Request, statement, success_message: str, failure_message: str) -> CheckResult:  # noqa: ANN001
    session_factory = getattr(request.app.state, "db_session_factory", None)
    if session_factory is None:
        return False, {"message": "database session factory unavailable"}

    async def _execute():
        async with session_factory() as session:
            await session.execute(statement)

    try:
        await asyncio.wait_for(_execute(), timeout=_CHECK_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        return False, {"message": f"{failure_message} (timed out)", "timeout_seconds": _CHECK_TIMEOUT_SECONDS}
    except Exception as exc:  # noqa: BLE001
        logger.debug("readiness_query_failed", exc_info=exc)
        return False, {"message": failure_message, "error": exc.__class__.__name__}
    return True, {"message": success_message}


async def _db_check(request: Request) -> CheckResult:
    return await _with_session(request, text("SELECT 1"), "database reachable", "database check failed")


async def _pricing_settings_check(request: Request) -> CheckResult:
    # Fails until the pricing_settings migration has been applied.
    return await _with_session(
        request,
        select(PricingSettings.org_id).limit(1),
        "pricing settings table available",
        "pricing settings table unavailable",
    )


async def _run_check(name: str, check_fn: Callable[[], Awaitable[CheckResult]]) -> dict[str, Any]:
    start = time.perf_counter()
    try:
        ok, detail = await check_fn()
    except Exception as exc:  # noqa: BLE001
        logger.exception("readiness_check_failed", extra={"extra": {"check": name}})
        ok = False
        detail = {"message": "unexpected error", "error": type(exc).__name__}
    elapsed_ms = (time.perf_counter() - start) * 1000
    return {"name": name, "ok": bool(ok), "ms": round(elapsed_ms, 2), "detail": detail}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    checks = [
        await _run_check("db", lambda: _db_check(request)),
        await _run_check("pricing_settings", lambda: _pricing_settings_check(request)),
    ]
    overall_ok = all(check["ok"] for check in checks)
    return JSONResponse(status_code=200 if overall_ok else 503, content={"ok": overall_ok, "checks": checks})
