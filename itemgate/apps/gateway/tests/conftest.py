"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from itemgate.core.config import load_public_items_config
from itemgate.core.store import Database

_ENV_KEYS = ["ITEMGATE_DB_PATH", "ITEMGATE_FILES_ROOT", "LOGFIRE_SEND_TO_LOGFIRE"]


@pytest_asyncio.fixture
async def files_root(tmp_path: Path) -> Path:
    """Gateway 临时文件根目录"""
    root = tmp_path / "files"
    root.mkdir(parents=True, exist_ok=True)
    return root


@pytest_asyncio.fixture
async def app(db: Database, tmp_db_path: Path, files_root: Path):
    """创建测试用 FastAPI app 实例（手动初始化，绕过 lifespan）"""
    os.environ["ITEMGATE_DB_PATH"] = str(tmp_db_path)
    os.environ["ITEMGATE_FILES_ROOT"] = str(files_root)
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from itemgate.gateway.main import create_app
    from itemgate.gateway.services.public_items import PublicItemsService

    application = create_app()

    public_items = PublicItemsService(db, load_public_items_config(), files_root)
    await public_items.ensure_marker_tags()
    application.state.db = db
    application.state.files_root = files_root
    application.state.public_items = public_items

    yield application

    for key in _ENV_KEYS:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
