"""公共访问异常体系

每个异常携带稳定的错误码与 HTTP 状态码，由 gateway 统一渲染。
ItemNotPublic 与 ItemNotFound 分开定义，避免在内部混淆"不存在"与"不可见"。
存储层异常（aiosqlite.Error）不做包装，原样向上传播。
"""


class PublicItemsError(Exception):
    """公共访问基础异常"""

    code: str = "PUBLIC_ITEMS_ERROR"
    status_code: int = 500

    def __init__(self, message: str, data: object = None) -> None:
        """
        Args:
            message: 错误描述
            data: 相关数据（如 item id）
        """
        super().__init__(message)
        self.message = message
        self.data = data


class ItemNotFound(PublicItemsError):
    """item 不存在"""

    code = "ITEM_NOT_FOUND"
    status_code = 404

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item with id {item_id} does not exist", data=item_id)


class ItemNotPublic(PublicItemsError):
    """item 存在但未通过公共可见性检查"""

    code = "ITEM_NOT_PUBLIC"
    status_code = 403

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Item with id {item_id} is not public", data=item_id)


class CannotEditPublicItem(PublicItemsError):
    """通过公共接口修改 item 的请求一律拒绝"""

    code = "CANNOT_EDIT_PUBLIC_ITEM"
    status_code = 403

    def __init__(self, item_id: str | None) -> None:
        super().__init__(f"Cannot edit public item {item_id}", data=item_id)


class MemberNotSignedIn(PublicItemsError):
    """需要登录的接口收到匿名请求"""

    code = "MEMBER_NOT_SIGNED_IN"
    status_code = 403

    def __init__(self) -> None:
        super().__init__("Member must be signed in")


class MemberCannotWriteItem(PublicItemsError):
    """成员对目标 item 没有写权限"""

    code = "MEMBER_CANNOT_WRITE_ITEM"
    status_code = 403

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Member cannot write item {item_id}", data=item_id)


class FileNotFound(PublicItemsError):
    """item 没有可下载的文件，或文件在存储中缺失"""

    code = "FILE_NOT_FOUND"
    status_code = 404

    def __init__(self, item_id: str) -> None:
        super().__init__(f"No file found for item {item_id}", data=item_id)


class TaskAlreadyRunError(PublicItemsError):
    """同一个 Task 实例被执行了两次"""

    code = "TASK_ALREADY_RUN"
    status_code = 500

    def __init__(self, task_name: str, status: str) -> None:
        super().__init__(
            f"Task {task_name} cannot run from status {status}",
            data=task_name,
        )
