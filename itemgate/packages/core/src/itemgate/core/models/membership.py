"""ItemMembership Domain Model

成员在某个 item path 上的权限授予，对该 path 下的全部子孙生效。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import PermissionLevel


class ItemMembership(BaseModel):
    """成员关系记录（只读）"""

    id: str = Field(description="唯一标识")
    member_id: str = Field(description="成员 ID")
    item_path: str = Field(description="授权所在的 item path")
    permission: PermissionLevel = Field(description="权限等级")
    creator: str = Field(description="授权者 member id")
    created_at: datetime = Field(description="创建时间")
