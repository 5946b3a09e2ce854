"""itemgate Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    PERMISSION_ORDER,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    MemberType,
    PermissionLevel,
    TaskOutcome,
    TaskStatus,
    permission_at_least,
    validate_transition,
)
from .file import (
    THUMBNAIL_MIMETYPE,
    FileDownload,
    build_file_path_with_prefix,
    get_file_extra,
)
from .item import (
    Item,
    build_item_path,
    build_path_from_id,
    parent_path_of,
)
from .member import Actor, Member, build_public_actor
from .membership import ItemMembership
from .tag import Category, ItemCategory, ItemTag, Tag

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskOutcome",
    "PermissionLevel",
    "MemberType",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    "PERMISSION_ORDER",
    "permission_at_least",
    # Item
    "Item",
    "build_item_path",
    "build_path_from_id",
    "parent_path_of",
    # Member
    "Member",
    "Actor",
    "build_public_actor",
    "ItemMembership",
    # Tag / Category
    "Tag",
    "ItemTag",
    "Category",
    "ItemCategory",
    # File
    "FileDownload",
    "THUMBNAIL_MIMETYPE",
    "build_file_path_with_prefix",
    "get_file_extra",
]
