"""Item Domain Model

item 在树中的位置由 path 表示：祖先链上每个 item 的 id（'-' 替换为 '_'）以 '.' 连接，
最后一段是 item 自身。标签与成员关系都挂在 path 上，祖先上的记录对子孙生效。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .membership import ItemMembership

PATH_SEPARATOR = "."


def build_path_from_id(item_id: str) -> str:
    """将 item id 转换为 path 片段"""
    return item_id.replace("-", "_")


def build_item_path(item_id: str, parent_path: str | None = None) -> str:
    """构造 item 的完整 path

    Args:
        item_id: item id
        parent_path: 父 item 的 path，None 表示根节点

    Returns:
        完整 path
    """
    segment = build_path_from_id(item_id)
    if not parent_path:
        return segment
    return f"{parent_path}{PATH_SEPARATOR}{segment}"


def parent_path_of(path: str) -> str | None:
    """返回父节点 path，根节点返回 None"""
    if PATH_SEPARATOR not in path:
        return None
    return path.rsplit(PATH_SEPARATOR, 1)[0]


class Item(BaseModel):
    """Item 数据模型

    由外部通用 item 存储拥有，本服务只读取（copy 协作者除外）。
    memberships 仅在成员关系合并任务之后填充。
    """

    id: str = Field(description="唯一标识，UUID 格式")
    name: str = Field(description="名称")
    description: str = Field(default="", description="描述")
    type: str = Field(default="folder", description="item 类型，如 folder / file / s3File")
    path: str = Field(description="树路径")
    extra: dict[str, Any] = Field(default_factory=dict, description="类型相关的附加数据")
    settings: dict[str, Any] = Field(default_factory=dict, description="展示设置")
    creator: str = Field(description="创建者 member id")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    memberships: list[ItemMembership] | None = Field(
        default=None,
        description="自身及继承自祖先的成员关系",
    )

    @property
    def parent_path(self) -> str | None:
        return parent_path_of(self.path)
