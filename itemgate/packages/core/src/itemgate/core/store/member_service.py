"""MemberService SQLite 实现"""

from datetime import UTC, datetime

import aiosqlite

from ..models.enums import MemberType
from ..models.member import Member


class MemberService:
    """成员读写"""

    async def get(self, member_id: str, handler: aiosqlite.Connection) -> Member | None:
        """根据 id 查询成员"""
        cursor = await handler.execute("SELECT * FROM members WHERE id = ?", (member_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return Member(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            type=MemberType(row["type"]),
        )

    async def create(self, member: Member, handler: aiosqlite.Connection) -> None:
        """写入成员记录"""
        await handler.execute(
            """
            INSERT INTO members (id, name, email, type, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                member.id,
                member.name,
                member.email,
                member.type.value,
                datetime.now(UTC).isoformat(),
            ),
        )
