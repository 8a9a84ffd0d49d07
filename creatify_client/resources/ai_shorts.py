from creatify_client.models import TimeoutPolicy
from creatify_client.resources.base import PreviewableTaskResource


class AiShortsResource(PreviewableTaskResource):
    """Generate a short video from a text prompt.

    Reads are tolerant and a poll that runs out of attempts yields a failed
    task instead of raising.
    """

    path = "/api/ai_shorts/"
    name = "AI Shorts"
    on_timeout = TimeoutPolicy.return_error_task
    tolerant_reads = True
