"""任务组合与执行引擎

BaseTask 定义生命周期与惰性绑定，TaskRunner 负责单个任务、任务序列和任务批次的执行。
"""

from .adapters import PathAndMimeTypeTask, file_item_download, thumbnail_download
from .base import BaseTask
from .hooks import PublicFileHooks
from .memberships import MergeItemMembershipsIntoItems
from .public import (
    GetItemCategoriesTask,
    GetItemsByCategoryTask,
    GetPublicItemIdsWithTagTask,
    GetPublicItemsWithTagTask,
    GetPublicItemTask,
)
from .runner import TaskRunner

__all__ = [
    "BaseTask",
    "TaskRunner",
    "GetPublicItemTask",
    "GetPublicItemIdsWithTagTask",
    "GetPublicItemsWithTagTask",
    "GetItemsByCategoryTask",
    "GetItemCategoriesTask",
    "MergeItemMembershipsIntoItems",
    "PathAndMimeTypeTask",
    "file_item_download",
    "thumbnail_download",
    "PublicFileHooks",
]
