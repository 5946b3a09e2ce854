"""结果整形适配任务

包装一个获取 item 的任务，把其结果整形为下载描述（路径 + MIME 类型），
被包装的任务本身不做任何修改。
"""

from collections.abc import Callable

import aiosqlite
import structlog

from ..errors import FileNotFound
from ..models.file import (
    THUMBNAIL_MIMETYPE,
    FileDownload,
    build_file_path_with_prefix,
    get_file_extra,
)
from ..models.item import Item
from .base import BaseTask

DEFAULT_MIMETYPE = "application/octet-stream"


class PathAndMimeTypeTask(BaseTask[FileDownload]):
    """在同一事务内执行被包装的任务，再把 item 整形为 FileDownload"""

    def __init__(
        self,
        source: BaseTask[Item],
        to_download: Callable[[Item], FileDownload],
    ) -> None:
        super().__init__(source.actor)
        self._source = source
        self._to_download = to_download

    @property
    def message(self) -> str:
        return f"resolve file of ({self._source.message})"

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> FileDownload:
        await self._source.run(handler, log)
        return self._to_download(self._source.result)


def file_item_download(service_method: str) -> Callable[[Item], FileDownload]:
    """文件类 item：从 item.extra 中按存储方式取出路径与 MIME 类型"""

    def to_download(item: Item) -> FileDownload:
        extra = get_file_extra(service_method, item.extra)
        if not extra or not extra.get("path"):
            raise FileNotFound(item.id)
        return FileDownload(
            filepath=extra["path"],
            mimetype=extra.get("mimetype") or DEFAULT_MIMETYPE,
        )

    return to_download


def thumbnail_download(thumbnails_prefix: str, size: str) -> Callable[[Item], FileDownload]:
    """缩略图：按 item id 与尺寸拼出存储路径"""

    def to_download(item: Item) -> FileDownload:
        return FileDownload(
            filepath=build_file_path_with_prefix(item.id, thumbnails_prefix, size),
            mimetype=THUMBNAIL_MIMETYPE,
        )

    return to_download
