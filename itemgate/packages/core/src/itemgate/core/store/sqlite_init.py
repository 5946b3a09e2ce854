"""SQLite 数据库初始化

PRAGMA 配置 + 表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

_MEMBERS_DDL = """
CREATE TABLE IF NOT EXISTS members (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    email       TEXT NOT NULL DEFAULT '',
    type        TEXT NOT NULL DEFAULT 'individual',
    created_at  TEXT NOT NULL
);
"""

# path 为祖先链，祖先上的 tag / membership 对子孙生效
_ITEMS_DDL = """
CREATE TABLE IF NOT EXISTS items (
    id           TEXT PRIMARY KEY,
    name         TEXT NOT NULL,
    description  TEXT NOT NULL DEFAULT '',
    type         TEXT NOT NULL DEFAULT 'folder',
    path         TEXT NOT NULL UNIQUE,
    extra        TEXT NOT NULL DEFAULT '{}',
    settings     TEXT NOT NULL DEFAULT '{}',
    creator      TEXT NOT NULL,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

_TAGS_DDL = """
CREATE TABLE IF NOT EXISTS tags (
    id    TEXT PRIMARY KEY,
    name  TEXT NOT NULL
);
"""

_ITEM_TAGS_DDL = """
CREATE TABLE IF NOT EXISTS item_tags (
    id          TEXT PRIMARY KEY,
    tag_id      TEXT NOT NULL,
    item_path   TEXT NOT NULL,
    creator     TEXT NOT NULL,
    created_at  TEXT NOT NULL,

    UNIQUE (tag_id, item_path),
    FOREIGN KEY (tag_id) REFERENCES tags(id) ON DELETE CASCADE,
    FOREIGN KEY (item_path) REFERENCES items(path) ON DELETE CASCADE
);
"""

_ITEM_MEMBERSHIPS_DDL = """
CREATE TABLE IF NOT EXISTS item_memberships (
    id          TEXT PRIMARY KEY,
    member_id   TEXT NOT NULL,
    item_path   TEXT NOT NULL,
    permission  TEXT NOT NULL,
    creator     TEXT NOT NULL,
    created_at  TEXT NOT NULL,

    UNIQUE (member_id, item_path),
    FOREIGN KEY (item_path) REFERENCES items(path) ON DELETE CASCADE
);
"""

_CATEGORIES_DDL = """
CREATE TABLE IF NOT EXISTS categories (
    id    TEXT PRIMARY KEY,
    name  TEXT NOT NULL,
    type  TEXT NOT NULL DEFAULT ''
);
"""

_ITEM_CATEGORIES_DDL = """
CREATE TABLE IF NOT EXISTS item_categories (
    id           TEXT PRIMARY KEY,
    item_id      TEXT NOT NULL,
    category_id  TEXT NOT NULL,
    created_at   TEXT NOT NULL,

    UNIQUE (item_id, category_id),
    FOREIGN KEY (item_id) REFERENCES items(id) ON DELETE CASCADE,
    FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
);
"""

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_items_created_at ON items(created_at);",
    "CREATE INDEX IF NOT EXISTS idx_item_tags_tag_id ON item_tags(tag_id);",
    "CREATE INDEX IF NOT EXISTS idx_item_tags_item_path ON item_tags(item_path);",
    "CREATE INDEX IF NOT EXISTS idx_item_memberships_item_path ON item_memberships(item_path);",
    "CREATE INDEX IF NOT EXISTS idx_item_categories_category_id ON item_categories(category_id);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    for ddl in (
        _MEMBERS_DDL,
        _ITEMS_DDL,
        _TAGS_DDL,
        _ITEM_TAGS_DDL,
        _ITEM_MEMBERSHIPS_DDL,
        _CATEGORIES_DDL,
        _ITEM_CATEGORIES_DDL,
    ):
        await conn.execute(ddl)

    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
