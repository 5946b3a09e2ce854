"""packages/core 测试配置 -- 核心层 fixture"""

import pytest
import pytest_asyncio
from itemgate.core.config import PublicItemsConfig
from itemgate.core.items import ItemTaskManager
from itemgate.core.models import Member
from itemgate.core.store import Database, ServiceGroup
from itemgate.core.tasks import TaskRunner


@pytest_asyncio.fixture
async def runner(db: Database) -> TaskRunner:
    """核心层任务执行器"""
    return TaskRunner(db)


@pytest.fixture
def public_actor() -> Member:
    """默认配置下的公共 actor"""
    return PublicItemsConfig().public_actor


@pytest.fixture
def item_task_manager(services: ServiceGroup) -> ItemTaskManager:
    """通用 item 任务工厂"""
    return ItemTaskManager(services.items, services.memberships, services.tags)
