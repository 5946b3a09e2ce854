"""Tag / Category 存储

tag 与分类的基础读写。公共可见性相关的查询在 PublicItemService 中。
"""

from datetime import datetime

import aiosqlite

from ..models.tag import Category, ItemCategory, ItemTag, Tag


class TagService:
    """tag 与 item_tags 关联"""

    async def ensure_tag(self, tag: Tag, handler: aiosqlite.Connection) -> None:
        """写入 tag，已存在时忽略"""
        await handler.execute(
            "INSERT OR IGNORE INTO tags (id, name) VALUES (?, ?)",
            (tag.id, tag.name),
        )

    async def get_tag(self, tag_id: str, handler: aiosqlite.Connection) -> Tag | None:
        cursor = await handler.execute("SELECT * FROM tags WHERE id = ?", (tag_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return Tag(id=row["id"], name=row["name"])

    async def create_item_tag(
        self,
        item_tag: ItemTag,
        handler: aiosqlite.Connection,
    ) -> None:
        """将 tag 挂到 item path 上"""
        await handler.execute(
            """
            INSERT INTO item_tags (id, tag_id, item_path, creator, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                item_tag.id,
                item_tag.tag_id,
                item_tag.item_path,
                item_tag.creator,
                item_tag.created_at.isoformat(),
            ),
        )

    async def get_item_tags_on_path(
        self,
        item_path: str,
        handler: aiosqlite.Connection,
    ) -> list[ItemTag]:
        """查询直接挂在该 path 上的 tag（不含继承）"""
        cursor = await handler.execute(
            "SELECT * FROM item_tags WHERE item_path = ? ORDER BY created_at ASC",
            (item_path,),
        )
        rows = await cursor.fetchall()
        return [
            ItemTag(
                id=row["id"],
                tag_id=row["tag_id"],
                item_path=row["item_path"],
                creator=row["creator"],
                created_at=datetime.fromisoformat(row["created_at"]),
            )
            for row in rows
        ]


class CategoryService:
    """分类与 item_categories 关联"""

    async def ensure_category(
        self,
        category: Category,
        handler: aiosqlite.Connection,
    ) -> None:
        await handler.execute(
            "INSERT OR IGNORE INTO categories (id, name, type) VALUES (?, ?, ?)",
            (category.id, category.name, category.type),
        )

    async def create_item_category(
        self,
        item_category: ItemCategory,
        handler: aiosqlite.Connection,
    ) -> None:
        await handler.execute(
            """
            INSERT INTO item_categories (id, item_id, category_id, created_at)
            VALUES (?, ?, ?, ?)
            """,
            (
                item_category.id,
                item_category.item_id,
                item_category.category_id,
                item_category.created_at.isoformat(),
            ),
        )
