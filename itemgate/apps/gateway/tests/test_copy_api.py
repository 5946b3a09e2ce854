"""POST /p/items/{id}/copy 测试

测试内容：
1. 匿名请求（无请求头 / 未知成员）403 MEMBER_NOT_SIGNED_IN，没有任何写入
2. 已登录成员复制到根节点
3. 复制到目标父节点，需要 write 权限
4. shouldCopyTags
5. 未公开 item 不能复制
"""

from httpx import AsyncClient
from itemgate.core.models import PermissionLevel
from itemgate.gateway.deps import MEMBER_HEADER


async def _item_count(db) -> int:
    cursor = await db.pool.execute("SELECT COUNT(*) FROM items")
    row = await cursor.fetchone()
    return row[0]


class TestCopyAuth:
    """复制需要登录"""

    async def test_anonymous_copy_rejected(self, client: AsyncClient, db, factory):
        source = await factory.item("source")
        await factory.make_public(source)
        before = await _item_count(db)

        resp = await client.post(f"/p/items/{source.id}/copy", json={})
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "MEMBER_NOT_SIGNED_IN"
        assert await _item_count(db) == before

    async def test_unknown_member_is_anonymous(self, client: AsyncClient, db, factory):
        source = await factory.item("source")
        await factory.make_public(source)

        resp = await client.post(
            f"/p/items/{source.id}/copy",
            json={},
            headers={MEMBER_HEADER: "not-a-member"},
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "MEMBER_NOT_SIGNED_IN"


class TestCopyItem:
    """已登录成员复制公开 item"""

    async def test_copy_to_root(self, client: AsyncClient, db, factory):
        member = await factory.member("copier")
        source = await factory.item("source")
        await factory.item("child", parent=source)
        await factory.make_public(source)

        resp = await client.post(
            f"/p/items/{source.id}/copy", headers={MEMBER_HEADER: member.id}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] != source.id
        assert data["name"] == "source"
        assert data["creator"] == member.id
        assert "." not in data["path"]
        # 源 item 与子节点各复制一份
        assert await _item_count(db) == 4

    async def test_copy_into_parent(self, client: AsyncClient, factory):
        member = await factory.member("copier")
        source = await factory.item("source")
        await factory.make_public(source)
        target = await factory.item("target")
        await factory.membership(member, target, PermissionLevel.WRITE)

        resp = await client.post(
            f"/p/items/{source.id}/copy",
            json={"parentId": target.id},
            headers={MEMBER_HEADER: member.id},
        )
        assert resp.status_code == 200
        assert resp.json()["path"].startswith(target.path + ".")

    async def test_copy_into_parent_without_write(self, client: AsyncClient, factory):
        member = await factory.member("copier")
        source = await factory.item("source")
        await factory.make_public(source)
        target = await factory.item("target")

        resp = await client.post(
            f"/p/items/{source.id}/copy",
            json={"parentId": target.id},
            headers={MEMBER_HEADER: member.id},
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "MEMBER_CANNOT_WRITE_ITEM"

    async def test_copy_with_tags(self, client: AsyncClient, factory):
        """shouldCopyTags=true 时副本保留 public tag，可以再通过公共接口读取"""
        member = await factory.member("copier")
        source = await factory.item("source")
        await factory.make_public(source)

        resp = await client.post(
            f"/p/items/{source.id}/copy",
            json={"shouldCopyTags": True},
            headers={MEMBER_HEADER: member.id},
        )
        copy_id = resp.json()["id"]

        resp = await client.get(f"/p/items/{copy_id}")
        assert resp.status_code == 200

    async def test_copy_without_tags_is_private(self, client: AsyncClient, factory):
        member = await factory.member("copier")
        source = await factory.item("source")
        await factory.make_public(source)

        resp = await client.post(
            f"/p/items/{source.id}/copy",
            json={"shouldCopyTags": False},
            headers={MEMBER_HEADER: member.id},
        )
        copy_id = resp.json()["id"]

        resp = await client.get(f"/p/items/{copy_id}")
        assert resp.status_code == 403

    async def test_copy_private_item(self, client: AsyncClient, db, factory):
        member = await factory.member("copier")
        source = await factory.item("private")
        before = await _item_count(db)

        resp = await client.post(
            f"/p/items/{source.id}/copy", headers={MEMBER_HEADER: member.id}
        )
        assert resp.status_code == 403
        assert resp.json()["error"]["code"] == "ITEM_NOT_PUBLIC"
        assert await _item_count(db) == before
