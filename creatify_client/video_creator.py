import asyncio
from typing import Any, Optional, Sequence, Union

from loguru import logger
from pydantic import BaseModel

from creatify_client.cache import LookupCache
from creatify_client.client import Creatify
from creatify_client.exceptions import PollTimeoutError, VideoCreationError
from creatify_client.models import AvatarInfo, Task, VideoResult, VoiceInfo

DEFAULT_BACKGROUND_URL = "https://video.creatify.ai/bg.jpg"


class ConversationSegment(BaseModel):
    script: str
    avatar_id: Optional[str] = None
    avatar_name: Optional[str] = None
    voice_id: Optional[str] = None
    voice_name: Optional[str] = None


class VideoCreator:
    """One-call avatar videos, resolving avatars and voices by name.

    Avatar and voice lists are fetched at most once per instance and kept
    for its lifetime; concurrent lookups share the same request.
    """

    def __init__(self, client: Creatify):
        self.client = client
        self.logger = logger
        self._cache: LookupCache[list[Any]] = LookupCache()

    @classmethod
    def from_credentials(cls, api_id: str, api_key: str, **kwargs: Any) -> "VideoCreator":
        return cls(Creatify.from_credentials(api_id, api_key, **kwargs))

    async def load_avatars(self) -> list[AvatarInfo]:
        return await self._cache.get_or_fetch("avatars", self.client.avatar.list_avatars)

    async def load_voices(self) -> list[VoiceInfo]:
        return await self._cache.get_or_fetch("voices", self.client.avatar.list_voices)

    async def preload(self) -> dict[str, int]:
        """Warm both caches; returns how many avatars and voices are available."""
        avatars, voices = await asyncio.gather(self.load_avatars(), self.load_voices())
        return {"avatars": len(avatars), "voices": len(voices)}

    async def find_avatar_by_name(self, name: str) -> Optional[AvatarInfo]:
        needle = name.lower()
        for avatar in await self.load_avatars():
            if avatar.name and needle in avatar.name.lower():
                return avatar
        return None

    async def find_voice_by_name(self, name: str) -> Optional[VoiceInfo]:
        needle = name.lower()
        for voice in await self.load_voices():
            if needle in voice.name.lower():
                return voice
        return None

    async def _resolve_avatar_id(
        self, avatar_id: Optional[str], avatar_name: Optional[str]
    ) -> str:
        if avatar_id:
            return avatar_id
        if avatar_name:
            avatar = await self.find_avatar_by_name(avatar_name)
            if avatar is None:
                raise VideoCreationError(f"No avatar found matching name: {avatar_name}")
            return avatar.avatar_id or avatar.id

        # nothing requested: fall back to the first available avatar
        avatars = await self.load_avatars()
        if not avatars:
            raise VideoCreationError("No avatars available. Please check your API credentials.")
        return avatars[0].avatar_id or avatars[0].id

    async def _resolve_voice_id(
        self, voice_id: Optional[str], voice_name: Optional[str]
    ) -> Optional[str]:
        if voice_id or not voice_name:
            return voice_id
        voice = await self.find_voice_by_name(voice_name)
        if voice is None:
            raise VideoCreationError(f"No voice found matching name: {voice_name}")
        return voice.voice_id

    async def _finish(
        self, created: Task, poll_interval: float, max_attempts: int
    ) -> VideoResult:
        try:
            task = await self.client.avatar.wait(created.id, poll_interval, max_attempts)
        except PollTimeoutError as e:
            raise VideoCreationError(str(e), task_id=created.id) from e

        if task.is_done and task.output:
            self.logger.info(f"Video {created.id} ready at {task.output}")
            return VideoResult(url=task.output, status="done", task_id=created.id)
        raise VideoCreationError(
            task.error_message
            or f"Video generation failed or timed out. Status: {task.status}",
            task_id=created.id,
        )

    async def create_video(
        self,
        script: str,
        avatar_id: Optional[str] = None,
        avatar_name: Optional[str] = None,
        voice_id: Optional[str] = None,
        voice_name: Optional[str] = None,
        aspect_ratio: str = "16:9",
        poll_interval: float = 5.0,
        max_attempts: int = 30,
    ) -> VideoResult:
        """Render a single avatar speaking ``script`` and return its URL.

        Raises:
            VideoCreationError: if the avatar or voice cannot be resolved, or
                the lipsync task fails or times out.
        """
        params: dict[str, Any] = {
            "text": script,
            "creator": await self._resolve_avatar_id(avatar_id, avatar_name),
            "aspect_ratio": aspect_ratio,
        }
        resolved_voice = await self._resolve_voice_id(voice_id, voice_name)
        if resolved_voice:
            params["voice_id"] = resolved_voice

        created = await self.client.avatar.create(params)
        return await self._finish(created, poll_interval, max_attempts)

    async def create_conversation(
        self,
        segments: Sequence[Union[ConversationSegment, dict[str, Any]]],
        background_url: str = DEFAULT_BACKGROUND_URL,
        aspect_ratio: str = "16:9",
        poll_interval: float = 5.0,
        max_attempts: int = 30,
    ) -> VideoResult:
        """Render several avatars taking turns, one segment each."""
        video_inputs = []
        for item in segments:
            segment = ConversationSegment.model_validate(item)
            voice: dict[str, Any] = {"type": "text", "input_text": segment.script}
            resolved_voice = await self._resolve_voice_id(segment.voice_id, segment.voice_name)
            if resolved_voice:
                voice["voice_id"] = resolved_voice

            video_inputs.append(
                {
                    "character": {
                        "type": "avatar",
                        "avatar_id": await self._resolve_avatar_id(
                            segment.avatar_id, segment.avatar_name
                        ),
                        "avatar_style": "normal",
                        "offset": {"x": -0.23, "y": 0.35},
                    },
                    "voice": voice,
                    "background": {"type": "image", "url": background_url},
                    "caption_setting": {"style": "normal-black", "offset": {"x": 0, "y": 0.45}},
                }
            )

        created = await self.client.avatar.create_multi_avatar(
            {"video_inputs": video_inputs, "aspect_ratio": aspect_ratio}
        )
        return await self._finish(created, poll_interval, max_attempts)
