"""配置模块 -- 可通过环境变量覆盖

包含数据库路径、本地文件根目录等路径配置，以及公共访问相关的构造期配置
（public / published tag、公共 actor、缩略图路径前缀）。
"""

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field

from .models.member import Member, build_public_actor

log = structlog.get_logger()

DEFAULT_PUBLIC_TAG_ID = "afc2efc2-525e-4692-915f-9ba06a7f7887"
DEFAULT_PUBLISHED_TAG_ID = "ea9a3b4e-7b67-44c2-a9df-528b6ae5424f"
DEFAULT_PUBLIC_ACTOR_ID = "12345678-1234-1234-1234-123456789012"
DEFAULT_PUBLIC_ACTOR_NAME = "graasp"


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("ITEMGATE_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "ITEMGATE_DB_PATH",
        str(_get_base_dir() / "sqlite" / "itemgate.db"),
    )


def get_files_root() -> Path:
    """获取本地文件存储根目录"""
    return Path(
        os.environ.get(
            "ITEMGATE_FILES_ROOT",
            str(_get_base_dir() / "files"),
        )
    )


def get_batch_concurrency() -> int:
    """获取批量任务同时执行的上限，每个任务占用一条独立连接"""
    return max(1, int(os.environ.get("ITEMGATE_BATCH_CONCURRENCY", "8")))


class PublicItemsConfig(BaseModel):
    """公共访问配置 -- 从环境变量加载

    环境变量:
        ITEMGATE_PUBLIC_TAG_ID: public tag ID
        ITEMGATE_PUBLISHED_TAG_ID: published tag ID
        ITEMGATE_PUBLIC_ACTOR_ID / ITEMGATE_PUBLIC_ACTOR_NAME: 公共 actor
        ITEMGATE_THUMBNAILS_PREFIX: 缩略图存储路径前缀
        ITEMGATE_FILE_SERVICE: 文件存储方式（local/s3）
    """

    public_tag_id: str = Field(default=DEFAULT_PUBLIC_TAG_ID, description="public tag ID")
    published_tag_id: str = Field(
        default=DEFAULT_PUBLISHED_TAG_ID,
        description="published tag ID，分类浏览的第二道门",
    )
    public_actor_id: str = Field(default=DEFAULT_PUBLIC_ACTOR_ID, description="公共 actor ID")
    public_actor_name: str = Field(
        default=DEFAULT_PUBLIC_ACTOR_NAME,
        description="公共 actor 名称",
    )
    thumbnails_prefix: str = Field(default="thumbnails", description="缩略图路径前缀")
    service_method: Literal["local", "s3"] = Field(
        default="local",
        description="文件存储方式，决定 item.extra 中文件信息所在的键",
    )

    @property
    def public_actor(self) -> Member:
        return build_public_actor(self.public_actor_id, self.public_actor_name)


def load_public_items_config() -> PublicItemsConfig:
    """从环境变量加载公共访问配置

    未设置的变量使用默认值；非法的 ITEMGATE_FILE_SERVICE 记录告警后回退为 local。

    Returns:
        PublicItemsConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("ITEMGATE_PUBLIC_TAG_ID"):
        kwargs["public_tag_id"] = val

    if val := os.environ.get("ITEMGATE_PUBLISHED_TAG_ID"):
        kwargs["published_tag_id"] = val

    if val := os.environ.get("ITEMGATE_PUBLIC_ACTOR_ID"):
        kwargs["public_actor_id"] = val

    if val := os.environ.get("ITEMGATE_PUBLIC_ACTOR_NAME"):
        kwargs["public_actor_name"] = val

    if val := os.environ.get("ITEMGATE_THUMBNAILS_PREFIX"):
        kwargs["thumbnails_prefix"] = val

    if val := os.environ.get("ITEMGATE_FILE_SERVICE"):
        if val in ("local", "s3"):
            kwargs["service_method"] = val
        else:
            log.warning(
                "invalid_file_service_config",
                env_var="ITEMGATE_FILE_SERVICE",
                value=val,
                fallback="local",
            )

    return PublicItemsConfig(**kwargs)
