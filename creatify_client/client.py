from typing import Any, Optional

from loguru import logger

from creatify_client.config import ClientOptions
from creatify_client.http import ApiClient, HttpClient
from creatify_client.poller import TaskPoller
from creatify_client.resources import (
    AiEditingResource,
    AiScriptsResource,
    AiShortsResource,
    AvatarResource,
    CustomTemplatesResource,
    DyoaResource,
    LipsyncV2Resource,
    MusicsResource,
    TextToSpeechResource,
    UrlToVideoResource,
    WorkspaceResource,
)


class Creatify:
    """Top-level Creatify API client.

    Every resource façade shares one HTTP client. Close it when you are
    done, preferably with ``async with``::

        async with Creatify.from_credentials("api-id", "api-key") as client:
            task = await client.text_to_speech.create_and_wait(
                {"script": "Hello there", "accent": accent_id}
            )
            print(task.output)

    Pass ``http`` to plug in another transport (tests use an in-memory
    fake); it must provide the :class:`~creatify_client.http.ApiClient`
    methods.
    """

    def __init__(
        self,
        options: ClientOptions,
        http: Optional[ApiClient] = None,
        poller: Optional[TaskPoller] = None,
    ):
        self.options = options
        if options.debug:
            logger.enable("creatify_client")

        self._http = http if http is not None else HttpClient(options)
        poller = poller or TaskPoller()

        self.avatar = AvatarResource(self._http, poller)
        self.lipsync_v2 = LipsyncV2Resource(self._http, poller)
        self.text_to_speech = TextToSpeechResource(self._http, poller)
        self.url_to_video = UrlToVideoResource(self._http, poller)
        self.ai_editing = AiEditingResource(self._http, poller)
        self.custom_templates = CustomTemplatesResource(self._http, poller)
        self.dyoa = DyoaResource(self._http, poller)
        self.ai_shorts = AiShortsResource(self._http, poller)
        self.ai_scripts = AiScriptsResource(self._http, poller)
        self.musics = MusicsResource(self._http)
        self.workspace = WorkspaceResource(self._http)

    @classmethod
    def from_credentials(cls, api_id: str, api_key: str, **kwargs: Any) -> "Creatify":
        """Shorthand for ``Creatify(ClientOptions(api_id=..., api_key=..., **kwargs))``."""
        return cls(ClientOptions(api_id=api_id, api_key=api_key, **kwargs))

    async def close(self) -> None:
        close = getattr(self._http, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "Creatify":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()
