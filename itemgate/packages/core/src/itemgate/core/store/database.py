"""数据库句柄

Database 持有两类连接：
- pool: 共享的 autocommit 连接，用于事务之外的临时查询（健康检查、分类列表过滤等）
- transaction(): 每个事务独占一条连接，BEGIN 后交给 Task 使用，成功提交、失败回滚

每个事务独占连接，run_multiple 中并发执行的任务互不干扰。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

log = structlog.get_logger()


async def connect(db_path: str) -> aiosqlite.Connection:
    """打开一条 autocommit 连接，事务由调用方显式管理"""
    conn = await aiosqlite.connect(db_path, isolation_level=None)
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")
    return conn


class Database:
    """连接池 + 事务句柄工厂"""

    def __init__(self, db_path: str, pool: aiosqlite.Connection) -> None:
        self.db_path = db_path
        self.pool = pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """开启一个事务，退出时提交；异常时回滚并重新抛出"""
        conn = await connect(self.db_path)
        try:
            await conn.execute("BEGIN")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                log.debug("transaction_rolled_back")
                raise
            await conn.commit()
        finally:
            await conn.close()

    async def close(self) -> None:
        await self.pool.close()
