"""PublicItemService -- 公共可见性判断

回答"item 是否公开可见"/"item 是否带有某个 tag"等问题。
tag 挂在 item path 上，祖先上的 tag 对全部子孙生效，因此所有判断都沿 path 向上匹配。

所有方法使用调用方传入的 handler，从不自行打开连接。
"""

from datetime import datetime

import aiosqlite

from ..models.item import Item
from ..models.tag import ItemCategory
from .item_service import row_to_item

# item_tags 行挂在 item 自身或其祖先上
_TAG_ON_ANCESTOR_OR_SELF = (
    "(t.item_path = i.path OR substr(i.path, 1, length(t.item_path) + 1) = t.item_path || '.')"
)


class PublicItemService:
    """公共可见性谓词层"""

    def __init__(self, public_tag_id: str) -> None:
        self.public_tag_id = public_tag_id

    async def has_public_tag(self, item: Item, handler: aiosqlite.Connection) -> bool:
        """item 自身或任一祖先带有 public tag"""
        return await self.has_tag(item, self.public_tag_id, handler)

    async def has_tag(
        self,
        item: Item,
        tag_id: str,
        handler: aiosqlite.Connection,
    ) -> bool:
        """item 自身或任一祖先带有 tag_id"""
        cursor = await handler.execute(
            """
            SELECT 1 FROM item_tags
            WHERE tag_id = ?
              AND (item_path = ? OR substr(?, 1, length(item_path) + 1) = item_path || '.')
            LIMIT 1
            """,
            (tag_id, item.path, item.path),
        )
        row = await cursor.fetchone()
        return row is not None

    async def get_public_items_by_tag(
        self,
        tag_id: str,
        handler: aiosqlite.Connection,
    ) -> list[Item]:
        """查询直接带有 tag_id 且公开可见的 item，按 created_at 正序"""
        cursor = await handler.execute(
            f"""
            SELECT i.* FROM items i
            WHERE EXISTS (
                SELECT 1 FROM item_tags t WHERE t.tag_id = ? AND t.item_path = i.path
            )
            AND EXISTS (
                SELECT 1 FROM item_tags t
                WHERE t.tag_id = ? AND {_TAG_ON_ANCESTOR_OR_SELF}
            )
            ORDER BY i.created_at ASC, i.id ASC
            """,
            (tag_id, self.public_tag_id),
        )
        rows = await cursor.fetchall()
        return [row_to_item(row) for row in rows]

    async def get_public_item_ids_by_tag(
        self,
        tag_id: str,
        handler: aiosqlite.Connection,
    ) -> list[str]:
        """与 get_public_items_by_tag 相同，只返回 id"""
        cursor = await handler.execute(
            f"""
            SELECT i.id FROM items i
            WHERE EXISTS (
                SELECT 1 FROM item_tags t WHERE t.tag_id = ? AND t.item_path = i.path
            )
            AND EXISTS (
                SELECT 1 FROM item_tags t
                WHERE t.tag_id = ? AND {_TAG_ON_ANCESTOR_OR_SELF}
            )
            ORDER BY i.created_at ASC, i.id ASC
            """,
            (tag_id, self.public_tag_id),
        )
        rows = await cursor.fetchall()
        return [row["id"] for row in rows]

    async def get_items_by_category(
        self,
        category_ids: list[str],
        handler: aiosqlite.Connection,
    ) -> list[dict[str, str]]:
        """查询属于任一给定分类的 item id，不检查公共可见性"""
        if not category_ids:
            return []
        placeholders = ", ".join("?" for _ in category_ids)
        cursor = await handler.execute(
            f"""
            SELECT item_id, MIN(created_at) AS first_at FROM item_categories
            WHERE category_id IN ({placeholders})
            GROUP BY item_id
            ORDER BY first_at ASC, item_id ASC
            """,
            tuple(category_ids),
        )
        rows = await cursor.fetchall()
        return [{"item_id": row["item_id"]} for row in rows]

    async def get_item_categories(
        self,
        item_id: str,
        handler: aiosqlite.Connection,
    ) -> list[ItemCategory]:
        """查询 item 所属的分类关联"""
        cursor = await handler.execute(
            "SELECT * FROM item_categories WHERE item_id = ? ORDER BY created_at ASC",
            (item_id,),
        )
        rows = await cursor.fetchall()
        return [
            ItemCategory(
                id=row["id"],
                item_id=row["item_id"],
                category_id=row["category_id"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]
