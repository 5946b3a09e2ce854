"""Tag / Category Domain Model

public、published 都是普通 tag，通过 (tag_id, item_path) 关联到 item。
分类通过 (item_id, category_id) 关联到 item。
"""

from datetime import datetime

from pydantic import BaseModel, Field


class Tag(BaseModel):
    """标签"""

    id: str = Field(description="唯一标识")
    name: str = Field(description="标签名")


class ItemTag(BaseModel):
    """item 与 tag 的关联，(tag_id, item_path) 唯一"""

    id: str = Field(description="唯一标识")
    tag_id: str = Field(description="标签 ID")
    item_path: str = Field(description="被标记的 item path")
    creator: str = Field(description="创建者 member id")
    created_at: datetime = Field(description="创建时间")


class Category(BaseModel):
    """分类"""

    id: str = Field(description="唯一标识")
    name: str = Field(description="分类名")
    type: str = Field(default="", description="分类类型 ID")


class ItemCategory(BaseModel):
    """item 与分类的关联，(item_id, category_id) 唯一"""

    id: str = Field(description="唯一标识")
    item_id: str = Field(description="item ID")
    category_id: str = Field(description="分类 ID")
    created_at: datetime = Field(description="创建时间")
