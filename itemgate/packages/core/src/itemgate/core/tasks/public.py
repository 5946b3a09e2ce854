"""公共访问任务

每个任务包装一次存储操作，并在返回数据前通过 PublicItemService 完成可见性检查。
"""

import aiosqlite
import structlog

from ..errors import ItemNotFound, ItemNotPublic
from ..models.item import Item
from ..models.member import Member
from ..models.tag import ItemCategory
from ..store.item_service import ItemService
from ..store.public_item_service import PublicItemService
from .base import BaseTask


class GetPublicItemTask(BaseTask[Item]):
    """获取公开可见的 item

    先查询 item（不存在时 ItemNotFound），再检查 public tag（未通过时 ItemNotPublic）。
    """

    def __init__(
        self,
        actor: Member,
        item_id: str,
        public_item_service: PublicItemService,
        item_service: ItemService,
    ) -> None:
        super().__init__(actor, {"item_id": item_id})
        self._public_item_service = public_item_service
        self._item_service = item_service

    @property
    def message(self) -> str:
        return f"get public item {self.input.get('item_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> Item:
        item_id = self.input["item_id"]
        item = await self._item_service.get(item_id, handler)
        if item is None:
            raise ItemNotFound(item_id)

        if not await self._public_item_service.has_public_tag(item, handler):
            raise ItemNotPublic(item_id)

        return item


class GetPublicItemIdsWithTagTask(BaseTask[list[str]]):
    """列出直接带有 tag_id 且公开可见的 item id

    查询本身已按 public tag 过滤，无需逐个检查。
    """

    def __init__(
        self,
        actor: Member,
        input: dict,
        public_item_service: PublicItemService,
    ) -> None:
        super().__init__(actor, input)
        self._public_item_service = public_item_service

    @property
    def message(self) -> str:
        return f"get public item ids with tag {self.input.get('tag_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> list[str]:
        return await self._public_item_service.get_public_item_ids_by_tag(
            self.input["tag_id"], handler
        )


class GetPublicItemsWithTagTask(BaseTask[list[Item]]):
    """列出直接带有 tag_id 且公开可见的 item"""

    def __init__(
        self,
        actor: Member,
        input: dict,
        public_item_service: PublicItemService,
    ) -> None:
        super().__init__(actor, input)
        self._public_item_service = public_item_service

    @property
    def message(self) -> str:
        return f"get public items with tag {self.input.get('tag_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> list[Item]:
        return await self._public_item_service.get_public_items_by_tag(
            self.input["tag_id"], handler
        )


class GetItemsByCategoryTask(BaseTask[list[dict[str, str]]]):
    """列出属于任一给定分类的 item id

    不检查公共可见性，过滤由调用方完成。
    """

    def __init__(
        self,
        actor: Member,
        input: dict,
        public_item_service: PublicItemService,
    ) -> None:
        super().__init__(actor, input)
        self._public_item_service = public_item_service

    @property
    def message(self) -> str:
        return f"get items in categories {self.input.get('category_ids')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> list[dict[str, str]]:
        category_ids = list(self.input.get("category_ids") or [])
        return await self._public_item_service.get_items_by_category(
            category_ids, handler
        )


class GetItemCategoriesTask(BaseTask[list[ItemCategory]]):
    """列出 item 所属的分类"""

    def __init__(
        self,
        actor: Member,
        input: dict,
        public_item_service: PublicItemService,
        item_service: ItemService,
    ) -> None:
        super().__init__(actor, input)
        self._public_item_service = public_item_service
        self._item_service = item_service

    @property
    def message(self) -> str:
        return f"get categories of item {self.input.get('item_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> list[ItemCategory]:
        item_id = self.input["item_id"]
        if await self._item_service.get(item_id, handler) is None:
            raise ItemNotFound(item_id)
        return await self._public_item_service.get_item_categories(item_id, handler)
