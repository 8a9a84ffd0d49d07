from creatify_client.resources.ai_editing import AiEditingResource
from creatify_client.resources.ai_scripts import AiScriptsResource
from creatify_client.resources.ai_shorts import AiShortsResource
from creatify_client.resources.avatar import AvatarResource
from creatify_client.resources.base import PreviewableTaskResource, TaskResource
from creatify_client.resources.custom_templates import CustomTemplatesResource
from creatify_client.resources.dyoa import DyoaResource
from creatify_client.resources.lipsync_v2 import LipsyncV2Resource
from creatify_client.resources.musics import MusicsResource
from creatify_client.resources.text_to_speech import TextToSpeechResource
from creatify_client.resources.url_to_video import UrlToVideoResource
from creatify_client.resources.workspace import WorkspaceResource

__all__ = [
    "AiEditingResource",
    "AiScriptsResource",
    "AiShortsResource",
    "AvatarResource",
    "CustomTemplatesResource",
    "DyoaResource",
    "LipsyncV2Resource",
    "MusicsResource",
    "PreviewableTaskResource",
    "TaskResource",
    "TextToSpeechResource",
    "UrlToVideoResource",
    "WorkspaceResource",
]
