"""TaskRunner 测试

测试内容：
1. run_single 返回 output，失败时回滚并抛出
2. run_single_sequence 共享事务：任一任务失败，后续任务不执行，全部写入回滚
3. run_single_sequence 返回最后一个任务的 output
4. run_multiple 各任务独立：失败位置为 None，其他任务的写入保留
5. run_multiple 同时执行的任务数受 max_concurrency 限制
"""

import asyncio

import aiosqlite
import pytest
import structlog
from itemgate.core.models import Member, TaskStatus
from itemgate.core.store import Database, ServiceGroup
from itemgate.core.tasks import BaseTask, TaskRunner


class CreateMemberTask(BaseTask[Member]):
    """写入一个成员并返回"""

    def __init__(self, actor: Member, member: Member, services: ServiceGroup) -> None:
        super().__init__(actor, {"member": member})
        self._services = services

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> Member:
        member = self.input["member"]
        await self._services.members.create(member, handler)
        return member


class FailingTask(BaseTask[None]):
    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> None:
        raise RuntimeError("task failed")


class ValueTask(BaseTask[int]):
    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> int:
        return self.input["value"]


class SlowTask(BaseTask[int]):
    """记录同时处于运行中的任务数"""

    async def _run(
        self,
        handler: aiosqlite.Connection,
        log: structlog.stdlib.BoundLogger,
    ) -> int:
        gauge = self.input["gauge"]
        gauge["active"] += 1
        gauge["peak"] = max(gauge["peak"], gauge["active"])
        await asyncio.sleep(0.01)
        gauge["active"] -= 1
        return self.input["value"]


def _member(member_id: str) -> Member:
    return Member(id=member_id, name=member_id)


async def _member_exists(db: Database, services: ServiceGroup, member_id: str) -> bool:
    return await services.members.get(member_id, db.pool) is not None


class TestRunSingle:
    """run_single"""

    async def test_returns_output_and_commits(
        self, db: Database, services: ServiceGroup, runner: TaskRunner, public_actor
    ):
        task = CreateMemberTask(public_actor, _member("m1"), services)
        result = await runner.run_single(task)

        assert result.id == "m1"
        assert await _member_exists(db, services, "m1")

    async def test_returns_bound_output(self, runner: TaskRunner, public_actor):
        """设置 get_result 时返回其求值结果"""
        task = ValueTask(public_actor, {"value": 3})
        task.get_result = lambda: task.result * 2
        assert await runner.run_single(task) == 6

    async def test_failure_propagates(self, runner: TaskRunner, public_actor):
        task = FailingTask(public_actor)
        with pytest.raises(RuntimeError, match="task failed"):
            await runner.run_single(task)
        assert task.status == TaskStatus.FAIL


class TestRunSingleSequence:
    """run_single_sequence"""

    async def test_returns_last_output(self, runner: TaskRunner, public_actor):
        first = ValueTask(public_actor, {"value": 1})
        second = ValueTask(public_actor)
        second.get_input = lambda: {"value": first.result + 10}

        assert await runner.run_single_sequence([first, second]) == 11

    async def test_empty_sequence_returns_none(self, runner: TaskRunner):
        assert await runner.run_single_sequence([]) is None

    async def test_failure_stops_sequence_and_rolls_back(
        self, db: Database, services: ServiceGroup, runner: TaskRunner, public_actor
    ):
        """A 写入后 B 失败：C 不执行，A 的写入被回滚"""
        a = CreateMemberTask(public_actor, _member("seq-a"), services)
        b = FailingTask(public_actor)
        c = CreateMemberTask(public_actor, _member("seq-c"), services)

        with pytest.raises(RuntimeError):
            await runner.run_single_sequence([a, b, c])

        assert a.status == TaskStatus.OK
        assert b.status == TaskStatus.FAIL
        assert c.status == TaskStatus.NEW
        assert not await _member_exists(db, services, "seq-a")
        assert not await _member_exists(db, services, "seq-c")

    async def test_first_failure_skips_rest(self, runner: TaskRunner, public_actor):
        """第一个任务失败时第二个任务从未运行"""
        a = FailingTask(public_actor)
        b = ValueTask(public_actor, {"value": 1})

        with pytest.raises(RuntimeError):
            await runner.run_single_sequence([a, b])

        assert b.status == TaskStatus.NEW
        assert b.result is None

    async def test_sequence_commits_all(
        self, db: Database, services: ServiceGroup, runner: TaskRunner, public_actor
    ):
        a = CreateMemberTask(public_actor, _member("ok-a"), services)
        b = CreateMemberTask(public_actor, _member("ok-b"), services)

        await runner.run_single_sequence([a, b])

        assert await _member_exists(db, services, "ok-a")
        assert await _member_exists(db, services, "ok-b")


class TestRunMultiple:
    """run_multiple"""

    async def test_failures_become_none(
        self, db: Database, services: ServiceGroup, runner: TaskRunner, public_actor
    ):
        """[X, 失败, Z] -> [X 结果, None, Z 结果]，X 与 Z 的写入保留"""
        x = CreateMemberTask(public_actor, _member("multi-x"), services)
        y = FailingTask(public_actor)
        z = CreateMemberTask(public_actor, _member("multi-z"), services)

        results = await runner.run_multiple([x, y, z])

        assert len(results) == 3
        assert results[0].id == "multi-x"
        assert results[1] is None
        assert results[2].id == "multi-z"
        assert await _member_exists(db, services, "multi-x")
        assert await _member_exists(db, services, "multi-z")

    async def test_preserves_order(self, runner: TaskRunner, public_actor):
        tasks = [ValueTask(public_actor, {"value": i}) for i in range(5)]
        assert await runner.run_multiple(tasks) == [0, 1, 2, 3, 4]

    async def test_empty_batch(self, runner: TaskRunner):
        assert await runner.run_multiple([]) == []


class TestRunMultipleConcurrency:
    """run_multiple 并发上限"""

    async def test_batch_respects_max_concurrency(self, db: Database, public_actor):
        """6 个任务、上限 2：任意时刻最多 2 个事务在执行，结果顺序不变"""
        runner = TaskRunner(db, max_concurrency=2)
        gauge = {"active": 0, "peak": 0}
        tasks = [SlowTask(public_actor, {"gauge": gauge, "value": i}) for i in range(6)]

        results = await runner.run_multiple(tasks)

        assert results == [0, 1, 2, 3, 4, 5]
        assert gauge["peak"] == 2
        assert gauge["active"] == 0

    async def test_failed_task_releases_slot(self, db: Database, public_actor):
        """上限 1 时失败任务也会让出位置，后续任务照常执行"""
        runner = TaskRunner(db, max_concurrency=1)
        results = await runner.run_multiple(
            [FailingTask(public_actor), ValueTask(public_actor, {"value": 7})]
        )
        assert results == [None, 7]

    async def test_rejects_non_positive_limit(self, db: Database):
        with pytest.raises(ValueError):
            TaskRunner(db, max_concurrency=0)
