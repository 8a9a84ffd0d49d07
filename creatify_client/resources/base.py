from typing import Any, ClassVar, Optional

from loguru import logger

from creatify_client.exceptions import CreatifyError, ResponseParseError
from creatify_client.http import ApiClient
from creatify_client.models import PollPolicy, Task, TimeoutPolicy
from creatify_client.poller import TaskPoller


def expect_object(data: Any, what: str) -> dict[str, Any]:
    """Reject empty or non-object bodies where the API should return one record."""
    if not isinstance(data, dict):
        raise ResponseParseError(
            None,
            "" if data is None else repr(data),
            f"Expected a {what} object in the response, got {type(data).__name__}",
        )
    return data


class TaskResource:
    """Façade over one family of remote asynchronous tasks.

    Subclasses only declare where the family lives and how it behaves:

    - ``path``: collection path, e.g. ``/api/lipsyncs/``.
    - ``poll_interval`` / ``max_attempts``: polling defaults for
      :meth:`create_and_wait`.
    - ``on_timeout``: whether running out of attempts raises
      :exc:`PollTimeoutError` or returns a failed snapshot.
    - ``tolerant_reads``: when set, :meth:`get` and :meth:`list` never raise;
      a failed read becomes a failed snapshot or an empty list so a poll
      loop survives a transient network blip.
    """

    path: ClassVar[str]
    name: ClassVar[str] = "Task"
    model: ClassVar[type[Task]] = Task
    poll_interval: ClassVar[float] = 2.0
    max_attempts: ClassVar[int] = 30
    on_timeout: ClassVar[TimeoutPolicy] = TimeoutPolicy.raise_error
    tolerant_reads: ClassVar[bool] = False

    def __init__(self, http: ApiClient, poller: Optional[TaskPoller] = None):
        self._http = http
        self._poller = poller or TaskPoller()
        self.logger = logger

    def _item_path(self, task_id: str, action: str = "") -> str:
        return f"{self.path}{task_id}/{action}"

    def policy(
        self, poll_interval: Optional[float] = None, max_attempts: Optional[int] = None
    ) -> PollPolicy:
        return PollPolicy(
            poll_interval=self.poll_interval if poll_interval is None else poll_interval,
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            on_timeout=self.on_timeout,
        )

    async def create(self, params: dict[str, Any]) -> Task:
        data = await self._http.post(self.path, json=params)
        return self._parse(data)

    async def get(self, task_id: str) -> Task:
        try:
            data = await self._http.get(self._item_path(task_id))
            return self._parse(data)
        except CreatifyError as e:
            if not self.tolerant_reads:
                raise
            self.logger.error(f"Error fetching {self.name} result for ID {task_id}: {e}")
            return self.model.error_snapshot(task_id, str(e))

    async def list(self) -> list[Task]:
        try:
            data = await self._http.get(self.path)
        except CreatifyError as e:
            if not self.tolerant_reads:
                raise
            self.logger.error(f"Error fetching {self.name} tasks: {e}")
            return []
        if isinstance(data, dict):
            data = data.get("results")
        if not isinstance(data, list):
            return []
        return [self.model.model_validate(item) for item in data]

    def is_finished(self, task: Task) -> bool:
        """Whether polling can stop. Families with their own lifecycle override this."""
        return task.is_terminal

    async def create_and_wait(
        self,
        params: dict[str, Any],
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ) -> Task:
        """Create a task and poll it until it is finished or timed out."""
        return await self._poller.wait_for(
            lambda: self.create(params),
            self.get,
            self.policy(poll_interval, max_attempts),
            until=self.is_finished,
        )

    async def wait(
        self,
        task_id: str,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ) -> Task:
        """Poll a task that was created earlier."""
        return await self._poller.poll(
            task_id, self.get, self.policy(poll_interval, max_attempts), until=self.is_finished
        )

    def _parse(self, data: Any) -> Task:
        return self.model.model_validate(expect_object(data, self.name))

    async def _post_action(self, task_id: str, action: str) -> Task:
        data = await self._http.post(self._item_path(task_id, f"{action}/"), json={})
        return self._parse(data)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} path={self.path!r}>"


class PreviewableTaskResource(TaskResource):
    """A family whose tasks can be previewed and rendered before they finalize."""

    async def generate_preview(self, task_id: str) -> Task:
        return await self._post_action(task_id, "preview")

    async def render(self, task_id: str) -> Task:
        return await self._post_action(task_id, "render")
