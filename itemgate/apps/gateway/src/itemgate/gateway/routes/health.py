"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、public tag 是否存在、文件根目录。
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
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. public_tag: 配置的 public tag 已写入 tags 表
    3. files_root: 本地文件根目录可访问
    """
    checks = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        db = request.app.state.db
        cursor = await db.pool.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        checks["sqlite"] = f"error: {str(e)}"
        all_ok = False

    # 2. public tag 检查
    try:
        public_items = request.app.state.public_items
        tag = await public_items.services.tags.get_tag(
            public_items.config.public_tag_id, request.app.state.db.pool
        )
        if tag is not None:
            checks["public_tag"] = "ok"
        else:
            checks["public_tag"] = "error: public tag missing"
            all_ok = False
    except Exception as e:
        checks["public_tag"] = f"error: {str(e)}"
        all_ok = False

    # 3. 文件根目录检查（不存在时只说明没有可下载文件，不影响就绪）
    files_root = request.app.state.files_root
    checks["files_root"] = "ok" if files_root.is_dir() else "missing"

    if not all_ok:
        log.warning("readiness_check_failed", checks=checks)
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "checks": checks},
        )

    return {"status": "ready", "checks": checks}
