"""全局 pytest 配置 -- 临时 SQLite 数据库 + 测试数据构造 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from itemgate.core.config import DEFAULT_PUBLIC_TAG_ID, DEFAULT_PUBLISHED_TAG_ID
from itemgate.core.items import new_item_id
from itemgate.core.models import (
    Category,
    Item,
    ItemCategory,
    ItemMembership,
    ItemTag,
    Member,
    PermissionLevel,
    Tag,
    build_item_path,
)
from itemgate.core.store import Database, ServiceGroup, create_database
from ulid import ULID

_BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)


class StoreFactory:
    """测试数据构造器：每次写入使用独立事务，created_at 严格递增"""

    def __init__(self, db: Database, services: ServiceGroup) -> None:
        self.db = db
        self.services = services
        self.public_tag_id = DEFAULT_PUBLIC_TAG_ID
        self.published_tag_id = DEFAULT_PUBLISHED_TAG_ID
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return _BASE_TIME + timedelta(seconds=self._tick)

    async def ensure_marker_tags(self) -> None:
        async with self.db.transaction() as handler:
            await self.services.tags.ensure_tag(
                Tag(id=self.public_tag_id, name="public"), handler
            )
            await self.services.tags.ensure_tag(
                Tag(id=self.published_tag_id, name="published"), handler
            )

    async def member(self, name: str = "alice") -> Member:
        member = Member(id=new_item_id(), name=name, email=f"{name}@example.com")
        async with self.db.transaction() as handler:
            await self.services.members.create(member, handler)
        return member

    async def item(
        self,
        name: str = "item",
        parent: Item | None = None,
        creator: Member | None = None,
        type: str = "folder",
        extra: dict | None = None,
    ) -> Item:
        item_id = new_item_id()
        now = self._now()
        item = Item(
            id=item_id,
            name=name,
            type=type,
            path=build_item_path(item_id, parent.path if parent else None),
            extra=extra or {},
            creator=creator.id if creator else "creator",
            created_at=now,
            updated_at=now,
        )
        async with self.db.transaction() as handler:
            await self.services.items.create(item, handler)
        return item

    async def tag(self, item: Item, tag_id: str) -> None:
        async with self.db.transaction() as handler:
            await self.services.tags.ensure_tag(Tag(id=tag_id, name=tag_id), handler)
            await self.services.tags.create_item_tag(
                ItemTag(
                    id=str(ULID()),
                    tag_id=tag_id,
                    item_path=item.path,
                    creator="creator",
                    created_at=self._now(),
                ),
                handler,
            )

    async def make_public(self, item: Item) -> None:
        await self.tag(item, self.public_tag_id)

    async def make_published(self, item: Item) -> None:
        await self.tag(item, self.published_tag_id)

    async def membership(
        self,
        member: Member,
        item: Item,
        permission: PermissionLevel = PermissionLevel.READ,
    ) -> ItemMembership:
        membership = ItemMembership(
            id=str(ULID()),
            member_id=member.id,
            item_path=item.path,
            permission=permission,
            creator="creator",
            created_at=self._now(),
        )
        async with self.db.transaction() as handler:
            await self.services.memberships.create(membership, handler)
        return membership

    async def category(self, name: str = "math") -> Category:
        category = Category(id=new_item_id(), name=name, type="discipline")
        async with self.db.transaction() as handler:
            await self.services.categories.ensure_category(category, handler)
        return category

    async def categorize(self, item: Item, category: Category) -> None:
        async with self.db.transaction() as handler:
            await self.services.categories.create_item_category(
                ItemCategory(
                    id=str(ULID()),
                    item_id=item.id,
                    category_id=category.id,
                    created_at=self._now(),
                ),
                handler,
            )


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db(tmp_db_path: Path) -> AsyncGenerator[Database, None]:
    """提供已初始化的临时数据库"""
    database = await create_database(str(tmp_db_path))
    yield database
    await database.close()


@pytest.fixture
def services() -> ServiceGroup:
    """提供存储服务组（使用默认 public tag）"""
    return ServiceGroup(DEFAULT_PUBLIC_TAG_ID)


@pytest_asyncio.fixture
async def factory(db: Database, services: ServiceGroup) -> StoreFactory:
    """提供测试数据构造器，public / published tag 已写入"""
    store_factory = StoreFactory(db, services)
    await store_factory.ensure_marker_tags()
    return store_factory
