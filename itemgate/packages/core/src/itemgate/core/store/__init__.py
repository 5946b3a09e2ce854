"""itemgate Core Store -- SQLite 持久化实现

提供工厂函数创建 Database（连接池 + 事务句柄）以及无状态的存储服务组。
"""

from pathlib import Path

from .database import Database, connect
from .item_service import ItemService
from .member_service import MemberService
from .membership_service import ItemMembershipService
from .public_item_service import PublicItemService
from .sqlite_init import init_db
from .tag_service import CategoryService, TagService


class ServiceGroup:
    """存储服务组 -- 各服务无状态，句柄由调用方传入"""

    def __init__(self, public_tag_id: str) -> None:
        self.items = ItemService()
        self.members = MemberService()
        self.memberships = ItemMembershipService()
        self.tags = TagService()
        self.categories = CategoryService()
        self.public_items = PublicItemService(public_tag_id)


async def create_database(db_path: str) -> Database:
    """创建 Database 并初始化表结构

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        Database 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    pool = await connect(db_path)
    await init_db(pool)

    return Database(db_path=db_path, pool=pool)


__all__ = [
    "Database",
    "ServiceGroup",
    "create_database",
    "connect",
    "init_db",
    "ItemService",
    "MemberService",
    "ItemMembershipService",
    "PublicItemService",
    "TagService",
    "CategoryService",
]
