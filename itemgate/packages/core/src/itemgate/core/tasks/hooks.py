"""文件 / 缩略图的前置任务

上传前置钩子无条件抛出 CannotEditPublicItem：拒绝发生在装配阶段，
不依赖 item 的 tag，也不触碰存储。
下载前置钩子返回一个任务列表：获取公开 item 并整形为 FileDownload。
"""

from ..config import PublicItemsConfig
from ..errors import CannotEditPublicItem
from ..models.member import Member
from ..store.item_service import ItemService
from ..store.public_item_service import PublicItemService
from .adapters import PathAndMimeTypeTask, file_item_download, thumbnail_download
from .base import BaseTask
from .public import GetPublicItemTask


class PublicFileHooks:
    """公共接口上文件与缩略图插件使用的前置任务工厂"""

    def __init__(
        self,
        config: PublicItemsConfig,
        public_item_service: PublicItemService,
        item_service: ItemService,
    ) -> None:
        self._config = config
        self._public_item_service = public_item_service
        self._item_service = item_service

    def upload_pre_hook_tasks(self, item_id: str | None) -> list[BaseTask]:
        raise CannotEditPublicItem(item_id)

    def thumbnail_upload_pre_hook_tasks(self, item_id: str | None) -> list[BaseTask]:
        raise CannotEditPublicItem(item_id)

    def download_pre_hook_tasks(self, actor: Member, item_id: str) -> list[BaseTask]:
        task = GetPublicItemTask(
            actor, item_id, self._public_item_service, self._item_service
        )
        return [PathAndMimeTypeTask(task, file_item_download(self._config.service_method))]

    def thumbnail_download_pre_hook_tasks(
        self,
        actor: Member,
        item_id: str,
        size: str,
    ) -> list[BaseTask]:
        task = GetPublicItemTask(
            actor, item_id, self._public_item_service, self._item_service
        )
        return [
            PathAndMimeTypeTask(
                task, thumbnail_download(self._config.thumbnails_prefix, size)
            )
        ]
