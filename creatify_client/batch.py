import asyncio
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Iterable,
    Optional,
    Sequence,
    TypeVar,
    Union,
)

from loguru import logger
from pydantic import BaseModel

from creatify_client.models import (
    AiEditingBatchItem,
    AiScriptsBatchItem,
    AiShortsBatchItem,
    AvatarBatchItem,
    BatchError,
    BatchOptions,
    BatchResult,
    LipsyncV2BatchItem,
    Task,
    TextToSpeechBatchItem,
)

if TYPE_CHECKING:
    from creatify_client.client import Creatify

T = TypeVar("T")
ItemT = TypeVar("ItemT", bound=BaseModel)

TaskFactory = Callable[[], Awaitable[T]]


class BatchRunner:
    """Runs independent coroutines with a ceiling on how many are in flight."""

    def __init__(self, sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.logger = logger
        self._sleep = sleep

    async def _execute(
        self,
        index: int,
        task: TaskFactory[T],
        options: BatchOptions,
        result: BatchResult[T],
    ) -> None:
        try:
            if options.task_start_delay > 0 and index > 0:
                await self._sleep(options.task_start_delay)
            value = await task()
        except Exception as e:
            self.logger.error(f"Batch task {index} failed: {e!r}")
            result.errors.append(BatchError(index=index, error=e))
        else:
            result.successes.append(value)

    async def run(
        self,
        tasks: Sequence[TaskFactory[T]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[T]:
        """Execute ``tasks`` with at most ``options.concurrency`` running at once.

        With ``continue_on_error=False`` no new task is admitted once a
        failure has been recorded; tasks already admitted still run to
        completion. ``raise_on_error=True`` then re-raises the first
        recorded error instead of returning the partial result.
        """
        options = options or BatchOptions()
        result: BatchResult[T] = BatchResult()
        in_flight: set[asyncio.Task] = set()
        next_index = 0

        try:
            while next_index < len(tasks):
                if not options.continue_on_error and result.errors:
                    self.logger.info(
                        f"Stopping batch admission at task {next_index} after a failure"
                    )
                    break

                if len(in_flight) >= options.concurrency:
                    done, _ = await asyncio.wait(
                        in_flight, return_when=asyncio.FIRST_COMPLETED
                    )
                    in_flight.difference_update(done)
                    continue

                index = next_index
                next_index += 1
                in_flight.add(
                    asyncio.create_task(
                        self._execute(index, tasks[index], options, result)
                    )
                )

            if in_flight:
                await asyncio.gather(*in_flight)
        except asyncio.CancelledError:
            for pending in in_flight:
                pending.cancel()
            # children finish their own cleanup before the cancellation propagates
            await asyncio.gather(*in_flight, return_exceptions=True)
            raise

        self.logger.info(
            f"Batch finished: {len(result.successes)} succeeded, "
            f"{len(result.errors)} failed, {len(tasks)} submitted"
        )
        if options.raise_on_error and result.errors:
            raise result.errors[0].error
        return result


class BatchProcessor:
    """Batch helpers that fan a list of descriptors out over a Creatify client."""

    def __init__(self, client: "Creatify", runner: Optional[BatchRunner] = None):
        self.client = client
        self.runner = runner or BatchRunner()

    @classmethod
    def from_credentials(cls, api_id: str, api_key: str, **kwargs: Any) -> "BatchProcessor":
        from creatify_client.client import Creatify

        return cls(Creatify.from_credentials(api_id, api_key, **kwargs))

    async def process_batch(
        self,
        tasks: Sequence[TaskFactory[T]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[T]:
        return await self.runner.run(tasks, options)

    def _factories(
        self,
        items: Iterable[Union[ItemT, dict[str, Any]]],
        item_model: type[ItemT],
        create_and_wait: Callable[[dict[str, Any]], Awaitable[Task]],
    ) -> list[TaskFactory[Task]]:
        def factory(params: dict[str, Any]) -> TaskFactory[Task]:
            return lambda: create_and_wait(params)

        return [
            factory(item_model.model_validate(item).model_dump(exclude_none=True))
            for item in items
        ]

    async def process_avatar_batch(
        self,
        items: Iterable[Union[AvatarBatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        def create_and_wait(params: dict[str, Any]) -> Awaitable[Task]:
            lipsync = {"text": params["text"], "creator": params["avatar_id"]}
            for key in ("voice_id", "aspect_ratio"):
                if key in params:
                    lipsync[key] = params[key]
            return self.client.avatar.create_and_wait(lipsync)

        tasks = self._factories(items, AvatarBatchItem, create_and_wait)
        return await self.runner.run(tasks, options)

    async def process_text_to_speech_batch(
        self,
        items: Iterable[Union[TextToSpeechBatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        tasks = self._factories(
            items, TextToSpeechBatchItem, self.client.text_to_speech.create_and_wait
        )
        return await self.runner.run(tasks, options)

    async def process_ai_editing_batch(
        self,
        items: Iterable[Union[AiEditingBatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        tasks = self._factories(
            items, AiEditingBatchItem, self.client.ai_editing.create_and_wait
        )
        return await self.runner.run(tasks, options)

    async def process_ai_shorts_batch(
        self,
        items: Iterable[Union[AiShortsBatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        tasks = self._factories(
            items, AiShortsBatchItem, self.client.ai_shorts.create_and_wait
        )
        return await self.runner.run(tasks, options)

    async def process_ai_scripts_batch(
        self,
        items: Iterable[Union[AiScriptsBatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        tasks = self._factories(
            items, AiScriptsBatchItem, self.client.ai_scripts.create_and_wait
        )
        return await self.runner.run(tasks, options)

    async def process_lipsync_v2_batch(
        self,
        items: Iterable[Union[LipsyncV2BatchItem, dict[str, Any]]],
        options: Optional[BatchOptions] = None,
    ) -> BatchResult[Task]:
        tasks = self._factories(
            items, LipsyncV2BatchItem, self.client.lipsync_v2.create_and_wait
        )
        return await self.runner.run(tasks, options)
