"""PublicItemsService -- 公共 item 接口的管道装配

每个接口对应一条任务管道：构造任务，用 get_input / get_result 把前一个任务的
结果接到后一个任务上，再交给 TaskRunner 执行。
"""

import asyncio
from pathlib import Path

import structlog
from itemgate.core.config import PublicItemsConfig, get_batch_concurrency
from itemgate.core.errors import FileNotFound
from itemgate.core.items import ItemTaskManager
from itemgate.core.models import FileDownload, Item, ItemCategory, Member, Tag
from itemgate.core.store import Database, ServiceGroup
from itemgate.core.tasks import (
    GetItemCategoriesTask,
    GetItemsByCategoryTask,
    GetPublicItemIdsWithTagTask,
    GetPublicItemTask,
    MergeItemMembershipsIntoItems,
    PublicFileHooks,
    TaskRunner,
)

log = structlog.get_logger()


class PublicItemsService:
    """公共 item 业务服务"""

    def __init__(
        self,
        db: Database,
        config: PublicItemsConfig,
        files_root: Path,
    ) -> None:
        self._db = db
        self._config = config
        self._files_root = files_root
        self.services = ServiceGroup(config.public_tag_id)
        self.runner = TaskRunner(db, max_concurrency=get_batch_concurrency())
        self.item_task_manager = ItemTaskManager(
            self.services.items,
            self.services.memberships,
            self.services.tags,
        )
        self.file_hooks = PublicFileHooks(
            config,
            self.services.public_items,
            self.services.items,
        )

    @property
    def config(self) -> PublicItemsConfig:
        return self._config

    @property
    def public_actor(self) -> Member:
        return self._config.public_actor

    async def ensure_marker_tags(self) -> None:
        """确保 public / published 两个 tag 存在"""
        async with self._db.transaction() as handler:
            await self.services.tags.ensure_tag(
                Tag(id=self._config.public_tag_id, name="public"), handler
            )
            await self.services.tags.ensure_tag(
                Tag(id=self._config.published_tag_id, name="published"), handler
            )

    async def get_member(self, member_id: str) -> Member | None:
        """按 id 查询成员（事务之外的临时查询）"""
        return await self.services.members.get(member_id, self._db.pool)

    async def get_item(
        self,
        actor: Member,
        item_id: str,
        with_memberships: bool = False,
    ) -> Item:
        """获取公开 item，可选附带成员关系"""
        t1 = GetPublicItemTask(
            actor, item_id, self.services.public_items, self.services.items
        )
        t2 = MergeItemMembershipsIntoItems(actor, {}, self.services.memberships)
        t2.skip = not with_memberships
        t2.get_input = lambda: {"items": [t1.result]}
        if with_memberships:
            # 合并任务列表进列表出，这里取第一个
            t2.get_result = lambda: t2.result[0]
        else:
            t2.get_result = lambda: t1.result
        return await self.runner.run_single_sequence([t1, t2], log)

    async def get_children(
        self,
        actor: Member,
        item_id: str,
        ordered: bool = False,
    ) -> list[Item]:
        """获取公开 item 的直接子节点"""
        t1 = GetPublicItemTask(
            actor, item_id, self.services.public_items, self.services.items
        )
        t2 = self.item_task_manager.create_get_children_task(actor)
        t2.get_input = lambda: {"ordered": ordered, "item": t1.result}
        return await self.runner.run_single_sequence([t1, t2], log)

    async def get_items_with_tag(
        self,
        actor: Member,
        tag_id: str,
        with_memberships: bool = False,
    ) -> list[Item]:
        """列出带有 tag_id 的公开 item

        id 列表与逐个获取分两步执行，期间被删除的 item 直接丢弃。
        """
        t1 = GetPublicItemIdsWithTagTask(
            actor, {"tag_id": tag_id}, self.services.public_items
        )
        item_ids = await self.runner.run_single(t1, log)

        get_tasks = [
            self.item_task_manager.create_get_task(actor, item_id) for item_id in item_ids
        ]
        items = await self.runner.run_multiple(get_tasks, log)
        valid_items = [item for item in items if item is not None]
        if not with_memberships:
            return valid_items

        t3 = MergeItemMembershipsIntoItems(
            actor, {"items": valid_items}, self.services.memberships
        )
        return await self.runner.run_single(t3, log)

    async def get_items_with_categories(
        self,
        actor: Member,
        category_ids: list[str],
    ) -> list[Item]:
        """列出属于给定分类、且同时带有 public 与 published tag 的 item"""
        task = GetItemsByCategoryTask(
            actor, {"category_ids": category_ids}, self.services.public_items
        )
        rows = await self.runner.run_single(task, log)

        get_tasks = [
            self.item_task_manager.create_get_task(actor, row["item_id"]) for row in rows
        ]
        items = [
            item
            for item in await self.runner.run_multiple(get_tasks, log)
            if item is not None
        ]

        accessible = await asyncio.gather(*(self._is_published(item) for item in items))
        return [item for item, ok in zip(items, accessible, strict=True) if ok]

    async def _is_published(self, item: Item) -> bool:
        # 两个条件各自独立求值
        public_items = self.services.public_items
        is_public = await public_items.has_public_tag(item, self._db.pool)
        is_published = await public_items.has_tag(
            item, self._config.published_tag_id, self._db.pool
        )
        return is_public and is_published

    async def get_item_categories(
        self,
        actor: Member,
        item_id: str,
    ) -> list[ItemCategory]:
        """列出 item 所属的分类"""
        task = GetItemCategoriesTask(
            actor,
            {"item_id": item_id},
            self.services.public_items,
            self.services.items,
        )
        return await self.runner.run_single(task, log)

    async def copy_item(
        self,
        member: Member,
        item_id: str,
        parent_id: str | None = None,
        should_copy_tags: bool | None = None,
    ) -> Item:
        """复制公开 item 到 member 可写的位置，默认不复制 tag"""
        t1 = GetPublicItemTask(
            member, item_id, self.services.public_items, self.services.items
        )
        copy_tasks = self.item_task_manager.create_copy_sub_task_sequence(
            member,
            t1,
            parent_id=parent_id,
            should_copy_tags=should_copy_tags if should_copy_tags is not None else False,
        )
        return await self.runner.run_single_sequence([t1, *copy_tasks], log)

    def reject_upload(self, item_id: str | None) -> None:
        self.file_hooks.upload_pre_hook_tasks(item_id)

    def reject_thumbnail_upload(self, item_id: str | None) -> None:
        self.file_hooks.thumbnail_upload_pre_hook_tasks(item_id)

    async def resolve_file(self, actor: Member, item_id: str) -> tuple[Path, FileDownload]:
        """运行文件下载前置任务，返回本地文件路径与下载描述"""
        tasks = self.file_hooks.download_pre_hook_tasks(actor, item_id)
        download = await self.runner.run_single_sequence(tasks, log)
        return self._local_path(item_id, download), download

    async def resolve_thumbnail(
        self,
        actor: Member,
        item_id: str,
        size: str,
    ) -> tuple[Path, FileDownload]:
        """运行缩略图下载前置任务，返回本地文件路径与下载描述"""
        tasks = self.file_hooks.thumbnail_download_pre_hook_tasks(actor, item_id, size)
        download = await self.runner.run_single_sequence(tasks, log)
        return self._local_path(item_id, download), download

    def _local_path(self, item_id: str, download: FileDownload) -> Path:
        root = self._files_root.resolve()
        path = (root / download.filepath).resolve()
        # 路径必须落在文件根目录之内
        if not path.is_relative_to(root) or not path.is_file():
            raise FileNotFound(item_id)
        return path
