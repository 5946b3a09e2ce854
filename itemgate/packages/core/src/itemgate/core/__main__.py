"""CLI 入口模块 -- python -m itemgate.core <command>

支持的命令：
  init-db  创建表结构，并写入 public / published 两个 tag
"""

import asyncio
import sys

from .config import get_db_path, load_public_items_config


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m itemgate.core <command>")
        print("命令:")
        print("  init-db  创建表结构并写入 public / published tag")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db")
        sys.exit(1)


async def init_database() -> None:
    """执行数据库初始化"""
    from .models.tag import Tag
    from .store import TagService, create_database

    db_path = get_db_path()
    config = load_public_items_config()

    print(f"数据库路径: {db_path}")

    db = await create_database(db_path)
    try:
        tags = TagService()
        async with db.transaction() as handler:
            await tags.ensure_tag(Tag(id=config.public_tag_id, name="public"), handler)
            await tags.ensure_tag(
                Tag(id=config.published_tag_id, name="published"), handler
            )
        print(f"public tag: {config.public_tag_id}")
        print(f"published tag: {config.published_tag_id}")
        print("初始化完成")
    finally:
        await db.close()


if __name__ == "__main__":
    main()
