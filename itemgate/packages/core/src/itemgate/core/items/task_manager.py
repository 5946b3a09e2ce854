"""ItemTaskManager -- 通用 item 任务工厂"""

from ..models.item import Item
from ..models.member import Member
from ..store.item_service import ItemService
from ..store.membership_service import ItemMembershipService
from ..store.tag_service import TagService
from ..tasks.base import BaseTask
from .tasks import CopyItemTask, GetChildrenTask, GetItemTask


class ItemTaskManager:
    """创建 get / get-children / copy 任务"""

    def __init__(
        self,
        item_service: ItemService,
        item_membership_service: ItemMembershipService,
        tag_service: TagService,
    ) -> None:
        self._item_service = item_service
        self._item_membership_service = item_membership_service
        self._tag_service = tag_service

    def create_get_task(self, actor: Member, item_id: str) -> GetItemTask:
        return GetItemTask(actor, item_id, self._item_service)

    def create_get_children_task(
        self,
        actor: Member,
        input: dict | None = None,
    ) -> GetChildrenTask:
        return GetChildrenTask(actor, input or {}, self._item_service)

    def create_copy_sub_task_sequence(
        self,
        actor: Member,
        root_task: BaseTask[Item],
        parent_id: str | None = None,
        should_copy_tags: bool = False,
    ) -> list[BaseTask]:
        """创建复制子任务序列，复制对象为 root_task 的结果

        返回的任务需与 root_task 放在同一序列中、位于其后执行。
        """
        copy_task = CopyItemTask(
            actor,
            {"parent_id": parent_id, "should_copy_tags": should_copy_tags},
            self._item_service,
            self._item_membership_service,
            self._tag_service,
        )
        copy_task.get_input = lambda: {
            "item": root_task.result,
            "parent_id": parent_id,
            "should_copy_tags": should_copy_tags,
        }
        return [copy_task]
