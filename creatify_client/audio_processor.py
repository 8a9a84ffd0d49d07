from loguru import logger

from creatify_client.client import Creatify
from creatify_client.models import Task


class AudioProcessor:
    """Text-to-speech shortcuts on top of :class:`Creatify`."""

    def __init__(self, client: Creatify):
        self.client = client
        self.api = client.text_to_speech
        self.logger = logger

    @classmethod
    def from_credentials(cls, api_id: str, api_key: str, **kwargs) -> "AudioProcessor":
        return cls(Creatify.from_credentials(api_id, api_key, **kwargs))

    async def generate_audio(self, script: str, accent: str, wait: bool = True) -> Task:
        """Start a text-to-speech task; with ``wait`` return the finished task."""
        params = {"script": script, "accent": accent}
        self.logger.debug(f"Generating audio with accent {accent} (wait={wait})")
        if wait:
            return await self.api.create_and_wait(params)
        return await self.api.create(params)

    async def check_audio_status(self, task_id: str) -> Task:
        return await self.api.get(task_id)

    async def wait_for_audio_completion(
        self, task_id: str, poll_interval: float = 2.0, max_attempts: int = 60
    ) -> Task:
        """Poll an already-created audio task until it is done or failed.

        Raises:
            PollTimeoutError: if it is still running after ``max_attempts`` polls.
        """
        return await self.api.wait(task_id, poll_interval, max_attempts)

    async def list_audio_tasks(self) -> list[Task]:
        return await self.api.list()

