"""Asyncio client for the Creatify video-generation API.

Quick start::

    import asyncio
    from creatify_client import Creatify

    async def main():
        async with Creatify.from_credentials("api-id", "api-key") as client:
            task = await client.avatar.create_and_wait(
                {"text": "Welcome aboard!", "creator": "<avatar id>"}
            )
            print(task.status, task.output)

    asyncio.run(main())

Long-running jobs follow the same pattern everywhere: ``create`` starts the
task, ``get`` fetches a fresh snapshot and ``create_and_wait`` polls until
it is done, failed or timed out. :class:`BatchRunner` and
:class:`BatchProcessor` fan many such jobs out with bounded concurrency.
"""

from loguru import logger

from creatify_client.audio_processor import AudioProcessor
from creatify_client.batch import BatchProcessor, BatchRunner
from creatify_client.cache import LookupCache
from creatify_client.client import Creatify
from creatify_client.config import ClientOptions
from creatify_client.exceptions import (
    ApiError,
    AuthenticationError,
    CreatifyError,
    NotFoundError,
    PollTimeoutError,
    RateLimitError,
    ResponseParseError,
    TransportError,
    VideoCreationError,
)
from creatify_client.http import ApiClient, HttpClient
from creatify_client.models import (
    BatchError,
    BatchOptions,
    BatchResult,
    PollPolicy,
    Task,
    TaskState,
    TimeoutPolicy,
    normalize_status,
)
from creatify_client.poller import TaskPoller
from creatify_client.video_creator import VideoCreator

logger.disable("creatify_client")

__version__ = "0.1.0"
__all__ = [
    "ApiClient",
    "ApiError",
    "AudioProcessor",
    "AuthenticationError",
    "BatchError",
    "BatchOptions",
    "BatchProcessor",
    "BatchResult",
    "BatchRunner",
    "ClientOptions",
    "Creatify",
    "CreatifyError",
    "HttpClient",
    "LookupCache",
    "NotFoundError",
    "PollPolicy",
    "PollTimeoutError",
    "RateLimitError",
    "ResponseParseError",
    "Task",
    "TaskPoller",
    "TaskState",
    "TimeoutPolicy",
    "TransportError",
    "VideoCreationError",
    "VideoCreator",
    "normalize_status",
]
