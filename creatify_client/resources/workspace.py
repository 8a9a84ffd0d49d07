from loguru import logger

from creatify_client.exceptions import CreatifyError
from creatify_client.http import ApiClient
from creatify_client.models import RemainingCredits


class WorkspaceResource:
    def __init__(self, http: ApiClient):
        self._http = http
        self.logger = logger

    async def remaining_credits(self) -> RemainingCredits:
        """Credits left in the workspace; reports 0 when the lookup fails."""
        try:
            data = await self._http.get("/api/remaining_credits/")
        except CreatifyError as e:
            self.logger.error(f"Error fetching remaining credits: {e}")
            return RemainingCredits(remaining_credits=0)
        return RemainingCredits.model_validate(data)
