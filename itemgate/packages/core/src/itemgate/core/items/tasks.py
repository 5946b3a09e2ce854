"""通用 item 任务 -- get / get-children / copy

公共接口通过 ItemTaskManager 使用这些任务。可见性检查不在此处：
由装配管道的调用方在前序任务（GetPublicItemTask）或结果过滤中完成。
"""

from datetime import UTC, datetime

import aiosqlite
import structlog
from ulid import ULID

from ..errors import ItemNotFound, MemberCannotWriteItem
from ..models.enums import PermissionLevel, permission_at_least
from ..models.item import Item, build_item_path
from ..models.member import Member
from ..models.membership import ItemMembership
from ..models.tag import ItemTag
from ..store.item_service import ItemService
from ..store.membership_service import ItemMembershipService
from ..store.tag_service import TagService
from ..tasks.base import BaseTask


def new_item_id() -> str:
    """生成 UUID 格式的 item id"""
    return str(ULID().to_uuid())


def children_order(item: Item) -> list[str]:
    """文件夹 item 在 extra.folder.childrenOrder 中保存的子节点顺序"""
    folder = item.extra.get("folder")
    if not isinstance(folder, dict):
        return []
    order = folder.get("childrenOrder")
    return list(order) if isinstance(order, list) else []


class GetItemTask(BaseTask[Item]):
    """按 id 获取 item"""

    def __init__(self, actor: Member, item_id: str, item_service: ItemService) -> None:
        super().__init__(actor, {"item_id": item_id})
        self._item_service = item_service

    @property
    def message(self) -> str:
        return f"get item {self.input.get('item_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> Item:
        item_id = self.input["item_id"]
        item = await self._item_service.get(item_id, handler)
        if item is None:
            raise ItemNotFound(item_id)
        return item


class GetChildrenTask(BaseTask[list[Item]]):
    """获取 item 的直接子节点

    input:
        item: 父 item（通常由 get_input 绑定到前序任务的结果）
        ordered: True 时按父节点 extra.folder.childrenOrder 排序，
                 未出现在顺序中的子节点按创建时间排在后面
    """

    def __init__(self, actor: Member, input: dict, item_service: ItemService) -> None:
        super().__init__(actor, input)
        self._item_service = item_service

    @property
    def message(self) -> str:
        item = self.input.get("item")
        return f"get children of item {item.id if item else None}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> list[Item]:
        item: Item = self.input["item"]
        children = await self._item_service.get_children(item, handler)

        if self.input.get("ordered"):
            order = {item_id: index for index, item_id in enumerate(children_order(item))}
            # sorted 稳定排序，未列入顺序的子节点保持创建时间顺序
            children = sorted(children, key=lambda child: order.get(child.id, len(order)))

        return children


class CopyItemTask(BaseTask[Item]):
    """复制 item 及其全部子孙到 parent_id 之下（None 表示根节点）

    input:
        item: 被复制的 item（通常由 get_input 绑定到前序任务的结果）
        parent_id: 目标父节点
        should_copy_tags: 是否同时复制直接挂在各 item 上的 tag

    目标父节点需要 write 及以上权限；复制到根节点时为 actor 授予 admin。
    """

    def __init__(
        self,
        actor: Member,
        input: dict,
        item_service: ItemService,
        item_membership_service: ItemMembershipService,
        tag_service: TagService,
    ) -> None:
        super().__init__(actor, input)
        self._item_service = item_service
        self._item_membership_service = item_membership_service
        self._tag_service = tag_service

    @property
    def message(self) -> str:
        item = self.input.get("item")
        return f"copy item {item.id if item else None} to {self.input.get('parent_id')}"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> Item:
        item: Item = self.input["item"]
        parent_id: str | None = self.input.get("parent_id")
        should_copy_tags: bool = bool(self.input.get("should_copy_tags", False))

        parent: Item | None = None
        if parent_id:
            parent = await self._item_service.get(parent_id, handler)
            if parent is None:
                raise ItemNotFound(parent_id)
            permission = await self._item_membership_service.get_permission_level(
                self.actor, parent, handler
            )
            if permission is None or not permission_at_least(
                permission, PermissionLevel.WRITE
            ):
                raise MemberCannotWriteItem(parent_id)

        # 子孙列表在写入前读取，复制到自身子树下也不会重复复制新节点
        originals = [item, *await self._item_service.get_descendants(item, handler)]
        id_map = {original.id: new_item_id() for original in originals}
        path_map: dict[str, str] = {}
        now = datetime.now(UTC)

        copies: list[Item] = []
        for original in originals:
            if original.id == item.id:
                new_parent_path = parent.path if parent else None
            else:
                new_parent_path = path_map[original.parent_path]
            new_id = id_map[original.id]
            new_path = build_item_path(new_id, new_parent_path)
            path_map[original.path] = new_path

            copy = original.model_copy(
                update={
                    "id": new_id,
                    "path": new_path,
                    "extra": _remap_children_order(original.extra, id_map),
                    "creator": self.actor.id,
                    "created_at": now,
                    "updated_at": now,
                    "memberships": None,
                }
            )
            await self._item_service.create(copy, handler)
            copies.append(copy)

            if should_copy_tags:
                for item_tag in await self._tag_service.get_item_tags_on_path(
                    original.path, handler
                ):
                    await self._tag_service.create_item_tag(
                        ItemTag(
                            id=str(ULID()),
                            tag_id=item_tag.tag_id,
                            item_path=new_path,
                            creator=self.actor.id,
                            created_at=now,
                        ),
                        handler,
                    )

        root_copy = copies[0]
        if parent is None:
            await self._item_membership_service.create(
                ItemMembership(
                    id=str(ULID()),
                    member_id=self.actor.id,
                    item_path=root_copy.path,
                    permission=PermissionLevel.ADMIN,
                    creator=self.actor.id,
                    created_at=now,
                ),
                handler,
            )

        log.info(
            "item_copied",
            source_id=item.id,
            copy_id=root_copy.id,
            parent_id=parent_id,
            item_count=len(copies),
            tags_copied=should_copy_tags,
        )
        return root_copy


def _remap_children_order(extra: dict, id_map: dict[str, str]) -> dict:
    """复制 extra，并把 folder.childrenOrder 中的 id 换成副本 id"""
    copied = dict(extra)
    folder = copied.get("folder")
    if isinstance(folder, dict) and isinstance(folder.get("childrenOrder"), list):
        copied["folder"] = {
            **folder,
            "childrenOrder": [id_map.get(i, i) for i in folder["childrenOrder"]],
        }
    return copied
