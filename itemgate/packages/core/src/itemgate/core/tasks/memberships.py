"""成员关系合并任务

为 item 附加自身及继承自祖先的成员关系，只读，不修改任何成员关系。
"""

import aiosqlite
import structlog

from ..models.item import Item
from ..models.member import Member
from ..store.membership_service import ItemMembershipService
from .base import BaseTask


class MergeItemMembershipsIntoItems(BaseTask[Item | list[Item]]):
    """把成员关系合并到 item 的 memberships 字段

    input["items"] 可以是单个 Item 或 Item 列表，结果保持相同形状：
    列表进、列表出。需要单个 item 时由调用方取第一个。
    """

    def __init__(
        self,
        actor: Member,
        input: dict,
        item_membership_service: ItemMembershipService,
    ) -> None:
        super().__init__(actor, input)
        self._item_membership_service = item_membership_service

    @property
    def message(self) -> str:
        return "merge item memberships into items"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> Item | list[Item]:
        items = self.input.get("items")
        if isinstance(items, Item):
            return await self._merge(items, handler)

        merged = []
        for item in items or []:
            merged.append(await self._merge(item, handler))
        return merged

    async def _merge(self, item: Item, handler: aiosqlite.Connection) -> Item:
        memberships = await self._item_membership_service.get_inherited_for_item(
            item, handler
        )
        return item.model_copy(update={"memberships": memberships})
