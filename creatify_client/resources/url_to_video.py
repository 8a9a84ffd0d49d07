from typing import Any, Optional

from creatify_client.models import LinkData, Page
from creatify_client.resources.base import TaskResource, expect_object


class UrlToVideoResource(TaskResource):
    """Turn a product page into a video.

    A *link* is scraped from a URL first; video tasks are then created
    from the link id through the inherited task methods.
    """

    path = "/api/link_to_videos/"
    name = "Link-to-video"
    poll_interval = 5.0
    max_attempts = 120

    async def create_link(self, url: str) -> LinkData:
        data = await self._http.post("/api/links/", json={"url": url})
        return LinkData.model_validate(expect_object(data, "link"))

    async def create_link_with_params(self, params: dict[str, Any]) -> LinkData:
        data = await self._http.post("/api/links/link_with_params/", json=params)
        return LinkData.model_validate(expect_object(data, "link"))

    async def update_link(self, link_id: str, params: dict[str, Any]) -> LinkData:
        data = await self._http.put(f"/api/links/{link_id}/", json=params)
        return LinkData.model_validate(expect_object(data, "link"))

    async def get_link(self, link_id: str) -> LinkData:
        data = await self._http.get(f"/api/links/{link_id}/")
        return LinkData.model_validate(expect_object(data, "link"))

    async def list_links(
        self, page: Optional[int] = None, limit: Optional[int] = None
    ) -> list[LinkData]:
        data = await self._http.get("/api/links/", params={"page": page, "limit": limit})
        if isinstance(data, dict):
            data = data.get("results", [])
        return [LinkData.model_validate(item) for item in data or []]

    async def list_links_paginated(self, page: int = 1, limit: int = 20) -> Page[LinkData]:
        data = await self._http.get(
            "/api/links/paginated/", params={"page": page, "limit": limit}
        )
        return Page[LinkData].model_validate(data)
