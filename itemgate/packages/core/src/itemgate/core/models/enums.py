"""枚举定义

包含 Task 生命周期状态机、Task 执行结果三态、成员权限等级、成员类型，
以及 VALID_TRANSITIONS 合法流转映射。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """Task 生命周期状态"""

    NEW = "NEW"
    RUNNING = "RUNNING"
    OK = "OK"
    FAIL = "FAIL"


# 合法状态流转；skip 的任务直接从 NEW 结束
VALID_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.NEW: {TaskStatus.RUNNING, TaskStatus.OK, TaskStatus.FAIL},
    TaskStatus.RUNNING: {TaskStatus.OK, TaskStatus.FAIL},
    # 终态不可再流转
    TaskStatus.OK: set(),
    TaskStatus.FAIL: set(),
}

TERMINAL_STATES: set[TaskStatus] = {TaskStatus.OK, TaskStatus.FAIL}


class TaskOutcome(StrEnum):
    """Task 执行结果（三态）

    SKIPPED 与 OK 都对应 TaskStatus.OK，区别在于 skip 的任务没有执行自身逻辑。
    """

    SKIPPED = "skipped"
    OK = "ok"
    FAILED = "failed"


class PermissionLevel(StrEnum):
    """成员权限等级，按 read < write < admin 排序"""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


PERMISSION_ORDER: dict[PermissionLevel, int] = {
    PermissionLevel.READ: 0,
    PermissionLevel.WRITE: 1,
    PermissionLevel.ADMIN: 2,
}


class MemberType(StrEnum):
    """成员类型"""

    INDIVIDUAL = "individual"
    GROUP = "group"


def validate_transition(from_status: TaskStatus, to_status: TaskStatus) -> bool:
    """验证状态流转是否合法

    Args:
        from_status: 当前状态
        to_status: 目标状态

    Returns:
        True 如果流转合法，否则 False
    """
    allowed = VALID_TRANSITIONS.get(from_status, set())
    return to_status in allowed


def permission_at_least(
    permission: PermissionLevel, required: PermissionLevel
) -> bool:
    """判断 permission 是否不低于 required"""
    return PERMISSION_ORDER[permission] >= PERMISSION_ORDER[required]
