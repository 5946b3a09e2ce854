"""Task 基类 -- 带显式生命周期和惰性输入/输出绑定的工作单元

生命周期: NEW -> RUNNING -> OK | FAIL；skip 的任务 NEW -> OK。

两个可选绑定在执行前设置：
- get_input: 在任务自身逻辑执行前一刻求值，覆盖构造时的 input，
  用于把同一序列中前序任务的 result 传给本任务
- get_result: 在任务进入 OK 时求值一次，结果作为 output（runner 返回的值），
  result 保留原始值；skip 的任务同样求值，便于用前序任务的结果替代被跳过的步骤

绑定函数只能读取前序任务的 result，不应访问存储。
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

import aiosqlite
import structlog

from ..errors import TaskAlreadyRunError
from ..models.enums import TaskOutcome, TaskStatus, validate_transition
from ..models.member import Member

R = TypeVar("R")

InputBinding = Callable[[], dict[str, Any]]
ResultBinding = Callable[[], Any]

_MISSING = object()


class BaseTask(ABC, Generic[R]):
    """授权感知、事务作用域内的工作单元"""

    def __init__(self, actor: Member, input: dict[str, Any] | None = None) -> None:
        self.actor = actor
        self.input: dict[str, Any] = dict(input or {})
        self.skip: bool = False
        self.get_input: InputBinding | None = None
        self.get_result: ResultBinding | None = None
        self.status: TaskStatus = TaskStatus.NEW
        self.outcome: TaskOutcome | None = None
        self._result: R | None = None
        self._output: Any = _MISSING

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        """日志中使用的可读描述"""
        return f"run {self.name}"

    @property
    def result(self) -> R | None:
        """任务自身逻辑产生的原始结果，skip 时为 None"""
        return self._result

    @property
    def output(self) -> Any:
        """runner 报告的结果：设置了 get_result 时为其求值结果，否则为 result"""
        if self._output is _MISSING:
            return self._result
        return self._output

    async def run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """执行任务

        Args:
            handler: 当前事务的连接
            log: 日志记录器，默认使用模块 logger

        Raises:
            TaskAlreadyRunError: 任务不处于 NEW 状态
            Exception: 任务自身逻辑的异常原样抛出
        """
        if self.status is not TaskStatus.NEW:
            raise TaskAlreadyRunError(self.name, self.status.value)
        log = log or structlog.get_logger()

        if self.skip:
            try:
                self._bind_output()
            except Exception:
                self._transition(TaskStatus.FAIL)
                self.outcome = TaskOutcome.FAILED
                raise
            self._transition(TaskStatus.OK)
            self.outcome = TaskOutcome.SKIPPED
            log.debug("task_skipped", task=self.name)
            return

        self._transition(TaskStatus.RUNNING)
        try:
            if self.get_input is not None:
                self.input = self.get_input()
            self._result = await self._run(handler, log)
            self._bind_output()
        except Exception:
            self._transition(TaskStatus.FAIL)
            self.outcome = TaskOutcome.FAILED
            raise

        self._transition(TaskStatus.OK)
        self.outcome = TaskOutcome.OK

    @abstractmethod
    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> R:
        """任务自身逻辑，返回值即 result"""
        ...

    def _bind_output(self) -> None:
        if self.get_result is not None:
            self._output = self.get_result()

    def _transition(self, to_status: TaskStatus) -> None:
        if not validate_transition(self.status, to_status):
            raise TaskAlreadyRunError(self.name, self.status.value)
        self.status = to_status

    def __repr__(self) -> str:
        return f"<{self.name} status={self.status.value} skip={self.skip}>"
