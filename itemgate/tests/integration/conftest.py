"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from itemgate.core.config import load_public_items_config
from itemgate.core.store import create_database
from itemgate.gateway.services.public_items import PublicItemsService


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path):
    """集成测试用 FastAPI app"""
    db_path = tmp_path / "integration.db"
    files_root = tmp_path / "files"
    files_root.mkdir(parents=True, exist_ok=True)
    os.environ["ITEMGATE_DB_PATH"] = str(db_path)
    os.environ["ITEMGATE_FILES_ROOT"] = str(files_root)
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from itemgate.gateway.main import create_app

    app = create_app()

    db = await create_database(str(db_path))
    public_items = PublicItemsService(db, load_public_items_config(), files_root)
    await public_items.ensure_marker_tags()
    app.state.db = db
    app.state.files_root = files_root
    app.state.public_items = public_items

    yield app

    await db.close()
    os.environ.pop("ITEMGATE_DB_PATH", None)
    os.environ.pop("ITEMGATE_FILES_ROOT", None)
    os.environ.pop("LOGFIRE_SEND_TO_LOGFIRE", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
