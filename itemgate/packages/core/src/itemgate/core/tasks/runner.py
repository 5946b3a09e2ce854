"""TaskRunner -- 任务执行器

- run_single: 单个任务，独立事务
- run_single_sequence: 有依赖的任务序列，共享一个事务，按顺序执行，任一失败即整体回滚
- run_multiple: 相互独立的任务批次，各自独立事务并发执行，失败只影响自身位置（None）；
  同时打开的事务数不超过 max_concurrency
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import aiosqlite
import structlog

from ..store.database import Database
from .base import BaseTask

logger = structlog.get_logger()

DEFAULT_MAX_CONCURRENCY = 8


class TaskRunner:
    """任务执行器"""

    def __init__(self, db: Database, max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._db = db
        self._batch_slots = asyncio.Semaphore(max_concurrency)

    async def run_single(
        self,
        task: BaseTask,
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> Any:
        """在新事务中执行单个任务

        成功提交并返回 task.output；失败回滚并重新抛出。
        """
        log = log or logger
        async with self._db.transaction() as handler:
            await self._run_task(task, handler, log)
        return task.output

    async def run_single_sequence(
        self,
        tasks: Sequence[BaseTask],
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> Any:
        """在同一事务中按顺序执行任务序列

        每个任务的 get_input 在该任务执行前一刻求值，可读取前序任务的 result。
        任一任务失败时后续任务不再执行，事务整体回滚，异常原样抛出。

        Returns:
            最后一个任务的 output；空序列返回 None
        """
        if not tasks:
            return None
        log = log or logger
        async with self._db.transaction() as handler:
            for task in tasks:
                await self._run_task(task, handler, log)
        return tasks[-1].output

    async def run_multiple(
        self,
        tasks: Sequence[BaseTask],
        log: structlog.stdlib.BoundLogger | None = None,
    ) -> list[Any]:
        """并发执行相互独立的任务

        每个任务使用独立事务（独立连接），同一时刻最多 max_concurrency 个；
        失败的任务在结果中对应位置为 None，不影响其他任务。

        Returns:
            与 tasks 等长的结果列表
        """
        log = log or logger
        return list(
            await asyncio.gather(*(self._run_isolated(task, log) for task in tasks))
        )

    async def _run_isolated(
        self,
        task: BaseTask,
        log: structlog.stdlib.BoundLogger,
    ) -> Any:
        try:
            async with self._batch_slots:
                return await self.run_single(task, log)
        except Exception as e:
            log.warning(
                "batch_task_dropped",
                task=task.name,
                message=task.message,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    @staticmethod
    async def _run_task(
        task: BaseTask,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        log.debug("task_started", task=task.name, message=task.message)
        try:
            await task.run(handler, log)
        except Exception as e:
            log.info(
                "task_failed",
                task=task.name,
                message=task.message,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        log.debug("task_finished", task=task.name, outcome=task.outcome)
