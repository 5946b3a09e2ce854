"""文件下载相关模型

下载前置任务把 item 整形为 FileDownload，实际文件读取在事务之外进行。
"""

from pydantic import BaseModel, Field

THUMBNAIL_MIMETYPE = "image/jpeg"

# item.extra 中保存文件信息的键，按存储方式区分
FILE_EXTRA_KEYS: dict[str, str] = {
    "local": "file",
    "s3": "s3File",
}


class FileDownload(BaseModel):
    """下载目标：存储内相对路径 + MIME 类型"""

    filepath: str = Field(description="存储内相对路径")
    mimetype: str = Field(description="MIME 类型")


def build_file_path_with_prefix(item_id: str, path_prefix: str, filename: str) -> str:
    """构造缩略图等按 item 归档的文件路径"""
    return f"{path_prefix}/{item_id}/{filename}"


def get_file_extra(service_method: str, extra: dict) -> dict | None:
    """按存储方式取出 item.extra 中的文件信息"""
    key = FILE_EXTRA_KEYS.get(service_method, "file")
    value = extra.get(key)
    return value if isinstance(value, dict) else None
