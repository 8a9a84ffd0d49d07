from typing import Any, Optional

from creatify_client.exceptions import CreatifyError, PollTimeoutError
from creatify_client.models import DyoaTask, PollPolicy
from creatify_client.resources.base import TaskResource


def _photos_ready(task: DyoaTask) -> bool:
    return task.status != "initializing" and bool(task.photos)


def _review_finished(task: DyoaTask) -> bool:
    return task.status != "pending"


DYOA_FINAL_STATUSES = frozenset({"approved", "rejected", "done", "error"})


class DyoaResource(TaskResource):
    """Design Your Own Avatar.

    A DYOA goes through its own lifecycle: photos are generated while it is
    ``initializing``, one photo is then submitted for review and the record
    stays ``pending`` until it is ``approved`` or ``rejected``. The generic
    done/failed polling does not apply, so the helpers below poll with
    explicit predicates. The inherited :meth:`create_and_wait` and
    :meth:`wait` stop once the record is approved, rejected, done or errored.
    """

    path = "/api/dyoa/"
    name = "DYOA"
    model = DyoaTask
    poll_interval = 10.0
    max_attempts = 30
    review_poll_interval = 60.0
    review_max_attempts = 60

    def is_finished(self, task: DyoaTask) -> bool:
        return task.status in DYOA_FINAL_STATUSES

    async def submit_for_review(self, dyoa_id: str, params: dict[str, Any]) -> DyoaTask:
        data = await self._http.post(self._item_path(dyoa_id, "submit_for_review/"), json=params)
        return self._parse(data)

    async def delete(self, dyoa_id: str) -> None:
        await self._http.delete(self._item_path(dyoa_id))

    async def create_and_wait_for_photos(
        self,
        params: dict[str, Any],
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ) -> DyoaTask:
        """Create a DYOA and wait until its candidate photos exist.

        Raises:
            PollTimeoutError: if no photos were generated in time.
        """
        policy = self.policy(poll_interval, max_attempts)
        try:
            return await self._poller.wait_for(
                lambda: self.create(params), self.get, policy, until=_photos_ready
            )
        except PollTimeoutError as e:
            raise PollTimeoutError(
                e.task_id,
                e.attempts,
                f"DYOA {e.task_id} photos were not generated within the timeout period",
            ) from e

    async def create_submit_and_wait(
        self,
        params: dict[str, Any],
        photo_index: int = 0,
        photo_poll_interval: Optional[float] = None,
        photo_max_attempts: Optional[int] = None,
        review_poll_interval: Optional[float] = None,
        review_max_attempts: Optional[int] = None,
    ) -> DyoaTask:
        """Create a DYOA, submit one of its photos and wait for the review.

        ``photo_index`` is clamped to the photos actually generated.
        """
        dyoa = await self.create_and_wait_for_photos(
            params, photo_poll_interval, photo_max_attempts
        )
        if not dyoa.photos:
            raise CreatifyError(f"No photos were generated for DYOA {dyoa.id}")

        chosen = dyoa.photos[max(0, min(photo_index, len(dyoa.photos) - 1))]
        submitted = await self.submit_for_review(dyoa.id, {"chosen_photo_id": chosen.id})

        policy = PollPolicy(
            poll_interval=(
                self.review_poll_interval if review_poll_interval is None else review_poll_interval
            ),
            max_attempts=(
                self.review_max_attempts if review_max_attempts is None else review_max_attempts
            ),
        )
        try:
            return await self._poller.poll(submitted.id, self.get, policy, until=_review_finished)
        except PollTimeoutError as e:
            raise PollTimeoutError(
                e.task_id,
                e.attempts,
                f"DYOA {e.task_id} review did not complete within the timeout period",
            ) from e
