"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，探测任务存储是否可用。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证存储可用性"""
    checks = {}
    all_ok = True

    store = getattr(request.app.state, "task_store", None)
    if store is None:
        checks["task_store"] = "error: not initialized"
        all_ok = False
    else:
        try:
            if await store.ping():
                checks["task_store"] = "ok"
            else:
                checks["task_store"] = "unreachable"
                all_ok = False
        except Exception as e:
            log.warning("ready_check_error", error=str(e))
            checks["task_store"] = "unreachable"
            all_ok = False

    config = getattr(request.app.state, "app_config", None)
    checks["store_mode"] = config.store_mode if config is not None else "unknown"

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
