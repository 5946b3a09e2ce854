"""文件与缩略图路由

POST /p/items/upload?id=: 公共接口不允许上传，始终 403
POST /p/items/thumbnails/upload?id=: 同上
GET  /p/items/{id}/download: 下载公开文件 item
GET  /p/items/thumbnails/{id}/download?size=: 下载公开 item 的缩略图

下载时先在事务内完成可见性检查与路径解析，文件读取在事务结束之后进行。
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from itemgate.core.models import Member
from starlette.responses import FileResponse

from ..deps import get_actor, get_public_items
from ..services.public_items import PublicItemsService

router = APIRouter(prefix="/p/items")

ThumbnailSize = Literal["small", "medium", "large", "original"]


@router.post("/upload")
async def upload_file(
    item_id: str | None = Query(default=None, alias="id"),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """上传文件 -- 始终拒绝"""
    public_items.reject_upload(item_id)


@router.post("/thumbnails/upload")
async def upload_thumbnail(
    item_id: str | None = Query(default=None, alias="id"),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """上传缩略图 -- 始终拒绝"""
    public_items.reject_thumbnail_upload(item_id)


@router.get("/thumbnails/{item_id}/download")
async def download_thumbnail(
    item_id: str,
    size: ThumbnailSize = Query(default="medium"),
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """下载公开 item 的缩略图"""
    path, download = await public_items.resolve_thumbnail(actor, item_id, size)
    return FileResponse(path, media_type=download.mimetype)


@router.get("/{item_id}/download")
async def download_file(
    item_id: str,
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """下载公开文件 item"""
    path, download = await public_items.resolve_file(actor, item_id)
    return FileResponse(path, media_type=download.mimetype, filename=path.name)
