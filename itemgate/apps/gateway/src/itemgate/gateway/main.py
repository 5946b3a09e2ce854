"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 公共 item 服务初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from itemgate.core.config import (
    get_batch_concurrency,
    get_db_path,
    get_files_root,
    load_public_items_config,
)
from itemgate.core.errors import PublicItemsError
from itemgate.core.store import create_database
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.request_context import RequestContextMiddleware
from .routes import files, health, items
from .services.public_items import PublicItemsService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和服务，关闭时清理连接"""
    db = await create_database(get_db_path())
    files_root = get_files_root()
    config = load_public_items_config()

    public_items = PublicItemsService(db, config, files_root)
    await public_items.ensure_marker_tags()

    app.state.db = db
    app.state.files_root = files_root
    app.state.public_items = public_items
    log.info(
        "public_items_initialized",
        public_tag_id=config.public_tag_id,
        published_tag_id=config.published_tag_id,
        public_actor_id=config.public_actor_id,
        service_method=config.service_method,
        thumbnails_prefix=config.thumbnails_prefix,
        batch_concurrency=get_batch_concurrency(),
    )

    yield

    if hasattr(app.state, "db") and app.state.db:
        await app.state.db.close()


async def public_items_error_handler(request: Request, exc: PublicItemsError) -> JSONResponse:
    """将 PublicItemsError 渲染为统一的错误结构"""
    log.info(
        "request_rejected",
        code=exc.code,
        status_code=exc.status_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": {
                "code": exc.code,
                "message": exc.message,
            }
        },
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="itemgate",
        version="0.1.0",
        description="公共 item 只读访问 API",
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(PublicItemsError, public_items_error_handler)

    log_format = setup_logging()
    log.debug("logging_configured", log_format=log_format, logfire=setup_logfire())

    # files 路由先于 items 注册，/thumbnails/... 优先匹配
    app.include_router(files.router, tags=["files"])
    app.include_router(items.router, tags=["items"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
