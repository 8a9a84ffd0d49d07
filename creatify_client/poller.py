import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from creatify_client.exceptions import PollTimeoutError
from creatify_client.models import PollPolicy, Task, TimeoutPolicy

TaskT = TypeVar("TaskT", bound=Task)

FetchStatus = Callable[[str], Awaitable[TaskT]]
Sleep = Callable[[float], Awaitable[Any]]


def _task_id(created: Any) -> str:
    if isinstance(created, dict):
        return str(created["id"])
    return str(created.id)


class TaskPoller:
    """Turns create -> eventually-consistent status into one awaitable result.

    Status fetches for a task are strictly sequential: one immediate check
    after creation, then at most ``policy.max_attempts`` further checks
    spaced ``policy.poll_interval`` seconds apart. A task that ends in the
    failed state is returned as-is; only running out of attempts is treated
    as a client-side failure, handled according to ``policy.on_timeout``.
    """

    def __init__(self, sleep: Sleep = asyncio.sleep):
        self.logger = logger
        self._sleep = sleep

    async def wait_for(
        self,
        create: Callable[[], Awaitable[Any]],
        fetch_status: FetchStatus,
        policy: Optional[PollPolicy] = None,
        until: Optional[Callable[[TaskT], bool]] = None,
    ) -> TaskT:
        created = await create()
        return await self.poll(_task_id(created), fetch_status, policy, until)

    async def _wait_before_retry(self, task_id: str, policy: PollPolicy) -> None:
        self.logger.debug(
            f"Task {task_id} still running, waiting {policy.poll_interval:.2f}s before next check"
        )
        await self._sleep(policy.poll_interval)

    async def poll(
        self,
        task_id: str,
        fetch_status: FetchStatus,
        policy: Optional[PollPolicy] = None,
        until: Optional[Callable[[TaskT], bool]] = None,
    ) -> TaskT:
        """Poll an existing task until it finishes or attempts run out.

        ``until`` replaces the default "reached a terminal state" check for
        resources whose lifecycle does not fit done/failed.
        """
        policy = policy or PollPolicy()
        finished = until or (lambda task: task.is_terminal)

        task = await fetch_status(task_id)
        attempts = 0

        while not finished(task) and attempts < policy.max_attempts:
            await self._wait_before_retry(task_id, policy)
            task = await fetch_status(task_id)
            attempts += 1

        if finished(task):
            self.logger.info(
                f"Task {task_id} finished with status {task.status!r} after {attempts} polls"
            )
            return task

        self.logger.warning(
            f"Task {task_id} still {task.status!r} after {attempts} polls, giving up"
        )
        error = PollTimeoutError(task_id, attempts)
        if policy.on_timeout is TimeoutPolicy.raise_error:
            raise error
        return type(task).timed_out(task_id, error.message, created_at=task.created_at)
