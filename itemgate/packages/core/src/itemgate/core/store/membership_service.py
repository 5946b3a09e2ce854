"""ItemMembershipService SQLite 实现

成员关系按 path 继承：item 的有效成员关系包括挂在自身和所有祖先上的记录。
"""

from datetime import datetime

import aiosqlite

from ..models.enums import PERMISSION_ORDER, PermissionLevel
from ..models.item import Item
from ..models.member import Member
from ..models.membership import ItemMembership

# 祖先或自身匹配条件：item.path 等于 item_path，或以 "<item_path>." 开头
_ANCESTOR_OR_SELF_CLAUSE = (
    "(item_path = ? OR substr(?, 1, length(item_path) + 1) = item_path || '.')"
)


class ItemMembershipService:
    """成员关系读取（以及 copy 协作者使用的写入）"""

    async def get_inherited_for_item(
        self,
        item: Item,
        handler: aiosqlite.Connection,
    ) -> list[ItemMembership]:
        """查询 item 自身及继承自祖先的成员关系，祖先在前"""
        cursor = await handler.execute(
            f"SELECT * FROM item_memberships WHERE {_ANCESTOR_OR_SELF_CLAUSE} "
            "ORDER BY length(item_path) ASC, created_at ASC",
            (item.path, item.path),
        )
        rows = await cursor.fetchall()
        return [self._row_to_membership(row) for row in rows]

    async def get_permission_level(
        self,
        member: Member,
        item: Item,
        handler: aiosqlite.Connection,
    ) -> PermissionLevel | None:
        """查询成员对 item 的最高有效权限，没有成员关系时返回 None"""
        cursor = await handler.execute(
            "SELECT permission FROM item_memberships "
            f"WHERE member_id = ? AND {_ANCESTOR_OR_SELF_CLAUSE}",
            (member.id, item.path, item.path),
        )
        rows = await cursor.fetchall()
        levels = [PermissionLevel(row["permission"]) for row in rows]
        if not levels:
            return None
        return max(levels, key=lambda level: PERMISSION_ORDER[level])

    async def create(
        self,
        membership: ItemMembership,
        handler: aiosqlite.Connection,
    ) -> None:
        """写入成员关系"""
        await handler.execute(
            """
            INSERT INTO item_memberships (id, member_id, item_path, permission,
                                          creator, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                membership.id,
                membership.member_id,
                membership.item_path,
                membership.permission.value,
                membership.creator,
                membership.created_at.isoformat(),
            ),
        )

    @staticmethod
    def _row_to_membership(row: aiosqlite.Row) -> ItemMembership:
        """将数据库行转换为 ItemMembership 模型"""
        return ItemMembership(
            id=row["id"],
            member_id=row["member_id"],
            item_path=row["item_path"],
            permission=PermissionLevel(row["permission"]),
            creator=row["creator"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
