from typing import Optional

from loguru import logger

from creatify_client.exceptions import CreatifyError
from creatify_client.http import ApiClient
from creatify_client.models import MusicCategory, MusicTrack


class MusicsResource:
    """Background music library. Lookups never raise; failures yield ``[]``."""

    def __init__(self, http: ApiClient):
        self._http = http
        self.logger = logger

    async def list_categories(self) -> list[MusicCategory]:
        try:
            data = await self._http.get("/api/music_categories/")
        except CreatifyError as e:
            self.logger.error(f"Error fetching music categories: {e}")
            return []
        if not isinstance(data, list):
            return []
        return [MusicCategory.model_validate(item) for item in data]

    async def list_tracks(self, category: Optional[str] = None) -> list[MusicTrack]:
        params = {"category": category} if category else None
        try:
            data = await self._http.get("/api/musics/", params=params)
        except CreatifyError as e:
            self.logger.error(f"Error fetching music tracks: {e}")
            return []
        if not isinstance(data, list):
            return []
        return [MusicTrack.model_validate(item) for item in data]
