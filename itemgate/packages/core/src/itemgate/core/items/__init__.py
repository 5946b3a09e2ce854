"""通用 item 任务管理"""

from .task_manager import ItemTaskManager
from .tasks import CopyItemTask, GetChildrenTask, GetItemTask, children_order, new_item_id

__all__ = [
    "ItemTaskManager",
    "GetItemTask",
    "GetChildrenTask",
    "CopyItemTask",
    "children_order",
    "new_item_id",
]
