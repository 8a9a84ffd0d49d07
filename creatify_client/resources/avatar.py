from typing import Any, Optional

from creatify_client.models import AvatarInfo, Page, Task, VoiceInfo
from creatify_client.resources.base import TaskResource


class AvatarResource(TaskResource):
    """AI avatars (personas), their voices, and lipsync videos.

    The task methods inherited from :class:`TaskResource` operate on
    lipsync tasks, e.g.::

        task = await client.avatar.create_and_wait(
            {"text": "Hello!", "creator": avatar_id, "aspect_ratio": "16:9"}
        )
        print(task.output)
    """

    path = "/api/lipsyncs/"
    name = "Lipsync"

    async def list_avatars(self, **filters: Any) -> list[AvatarInfo]:
        """List personas, optionally filtered by ``age_range``, ``gender``,
        ``location`` or ``style``."""
        data = await self._http.get("/api/personas/", params=filters or None)
        return [AvatarInfo.model_validate(item) for item in data or []]

    async def list_avatars_paginated(
        self, page: int = 1, limit: int = 20, **filters: Any
    ) -> Page[AvatarInfo]:
        data = await self._http.get(
            "/api/personas-paginated/", params={"page": page, "limit": limit, **filters}
        )
        return Page[AvatarInfo].model_validate(data)

    async def list_voices(self) -> list[VoiceInfo]:
        data = await self._http.get("/api/voices/")
        return [VoiceInfo.model_validate(item) for item in data or []]

    async def create_multi_avatar(self, params: dict[str, Any]) -> Task:
        """Start a conversation video with several avatars.

        The resulting task is polled through the regular lipsync endpoints.
        """
        data = await self._http.post(f"{self.path}multi_avatar/", json=params)
        return self._parse(data)

    async def create_multi_avatar_and_wait(
        self,
        params: dict[str, Any],
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ) -> Task:
        return await self._poller.wait_for(
            lambda: self.create_multi_avatar(params),
            self.get,
            self.policy(poll_interval, max_attempts),
            until=self.is_finished,
        )
