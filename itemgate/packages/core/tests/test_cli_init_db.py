"""CLI init-db 测试

测试内容：
1. init-db 创建数据库并写入 public / published tag
2. 重复执行幂等
"""

from pathlib import Path

import pytest
from itemgate.core.__main__ import init_database
from itemgate.core.config import DEFAULT_PUBLIC_TAG_ID, DEFAULT_PUBLISHED_TAG_ID
from itemgate.core.store import TagService, connect
from itemgate.core.store.sqlite_init import verify_wal_mode


class TestInitDb:
    """python -m itemgate.core init-db"""

    async def test_init_db_creates_marker_tags(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        db_path = tmp_path / "cli" / "itemgate.db"
        monkeypatch.setenv("ITEMGATE_DB_PATH", str(db_path))
        monkeypatch.delenv("ITEMGATE_PUBLIC_TAG_ID", raising=False)
        monkeypatch.delenv("ITEMGATE_PUBLISHED_TAG_ID", raising=False)

        await init_database()
        # 幂等
        await init_database()

        conn = await connect(str(db_path))
        try:
            tags = TagService()
            assert await tags.get_tag(DEFAULT_PUBLIC_TAG_ID, conn) is not None
            assert await tags.get_tag(DEFAULT_PUBLISHED_TAG_ID, conn) is not None
            assert await verify_wal_mode(conn) is True
        finally:
            await conn.close()
