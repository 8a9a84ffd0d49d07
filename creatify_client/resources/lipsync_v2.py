from creatify_client.models import TimeoutPolicy
from creatify_client.resources.base import PreviewableTaskResource


class LipsyncV2Resource(PreviewableTaskResource):
    """Multi-scene lipsync videos (``video_inputs`` list + ``aspect_ratio``)."""

    path = "/api/lipsyncs_v2/"
    name = "Lipsync v2"
    on_timeout = TimeoutPolicy.return_error_task
    tolerant_reads = True
