"""公共 item 路由

GET  /p/items/{id}: 获取公开 item，withMemberships 时附带成员关系
GET  /p/items/{id}/children: 获取公开 item 的子节点，ordered 时按文件夹顺序
GET  /p/items/?tagId=: 列出带有 tagId 的公开 item
GET  /p/items/with-categories?category=: 列出属于给定分类且已发布的公开 item
GET  /p/items/{itemId}/categories: 列出 item 所属分类
POST /p/items/{id}/copy: 复制公开 item（需要登录）
"""

from fastapi import APIRouter, Depends, Query
from itemgate.core.models import Item, ItemCategory, Member
from pydantic import BaseModel, ConfigDict, Field

from ..deps import get_actor, get_public_items, require_member
from ..services.public_items import PublicItemsService

router = APIRouter(prefix="/p/items")


class CopyItemBody(BaseModel):
    """复制请求体"""

    model_config = ConfigDict(populate_by_name=True)

    parent_id: str | None = Field(default=None, alias="parentId")
    should_copy_tags: bool | None = Field(default=None, alias="shouldCopyTags")


@router.get("/", response_model=list[Item])
async def get_items_with_tag(
    tag_id: str = Query(alias="tagId", description="tag ID"),
    with_memberships: bool = Query(default=False, alias="withMemberships"),
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """列出直接带有 tagId 的公开 item"""
    return await public_items.get_items_with_tag(actor, tag_id, with_memberships)


@router.get("/with-categories", response_model=list[Item])
async def get_items_with_categories(
    category: list[str] = Query(default=[], description="分类 ID，可重复"),
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """列出属于任一给定分类、且同时带有 public 与 published tag 的 item"""
    return await public_items.get_items_with_categories(actor, category)


@router.get("/{item_id}", response_model=Item)
async def get_item(
    item_id: str,
    with_memberships: bool = Query(default=False, alias="withMemberships"),
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """获取公开 item"""
    return await public_items.get_item(actor, item_id, with_memberships)


@router.get("/{item_id}/children", response_model=list[Item])
async def get_children(
    item_id: str,
    ordered: bool = Query(default=False),
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """获取公开 item 的直接子节点"""
    return await public_items.get_children(actor, item_id, ordered)


@router.get("/{item_id}/categories", response_model=list[ItemCategory])
async def get_item_categories(
    item_id: str,
    actor: Member = Depends(get_actor),
    public_items: PublicItemsService = Depends(get_public_items),
):
    """列出 item 所属分类"""
    return await public_items.get_item_categories(actor, item_id)


@router.post("/{item_id}/copy", response_model=Item)
async def copy_item(
    item_id: str,
    member: Member = Depends(require_member),
    body: CopyItemBody | None = None,
    public_items: PublicItemsService = Depends(get_public_items),
):
    """复制公开 item；匿名请求在任何任务执行前被拒绝"""
    body = body or CopyItemBody()
    return await public_items.copy_item(
        member,
        item_id,
        parent_id=body.parent_id,
        should_copy_tags=body.should_copy_tags,
    )
