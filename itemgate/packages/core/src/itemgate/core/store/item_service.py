"""ItemService SQLite 实现

通用 item 存储的最小读写实现。所有方法使用调用方传入的 handler，
不自行提交事务。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.item import Item

# 子孙匹配条件：path 以 "<祖先 path>." 开头
_DESCENDANT_CLAUSE = "substr(path, 1, length(?) + 1) = ? || '.'"


def row_to_item(row: aiosqlite.Row) -> Item:
    """将 items 表的一行转换为 Item 模型"""
    return Item(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        type=row["type"],
        path=row["path"],
        extra=json.loads(row["extra"]) if row["extra"] else {},
        settings=json.loads(row["settings"]) if row["settings"] else {},
        creator=row["creator"],
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class ItemService:
    """通用 item 存储"""

    async def get(self, item_id: str, handler: aiosqlite.Connection) -> Item | None:
        """根据 id 查询 item"""
        cursor = await handler.execute("SELECT * FROM items WHERE id = ?", (item_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return row_to_item(row)

    async def get_children(
        self,
        item: Item,
        handler: aiosqlite.Connection,
    ) -> list[Item]:
        """查询直接子节点，按 created_at 正序"""
        cursor = await handler.execute(
            f"SELECT * FROM items WHERE {_DESCENDANT_CLAUSE} "
            "AND instr(substr(path, length(?) + 2), '.') = 0 "
            "ORDER BY created_at ASC, id ASC",
            (item.path, item.path, item.path),
        )
        rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def get_descendants(
        self,
        item: Item,
        handler: aiosqlite.Connection,
    ) -> list[Item]:
        """查询全部子孙，父节点总在子节点之前"""
        cursor = await handler.execute(
            f"SELECT * FROM items WHERE {_DESCENDANT_CLAUSE} "
            "ORDER BY length(path) ASC, created_at ASC",
            (item.path, item.path),
        )
        rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def create(self, item: Item, handler: aiosqlite.Connection) -> None:
        """写入 item 记录"""
        await handler.execute(
            """
            INSERT INTO items (id, name, description, type, path, extra, settings,
                               creator, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.id,
                item.name,
                item.description,
                item.type,
                item.path,
                json.dumps(item.extra, ensure_ascii=False),
                json.dumps(item.settings, ensure_ascii=False),
                item.creator,
                item.created_at.isoformat(),
                item.updated_at.isoformat(),
            ),
        )
