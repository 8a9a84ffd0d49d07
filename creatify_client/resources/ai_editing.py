from creatify_client.resources.base import TaskResource


class AiEditingResource(TaskResource):
    """Re-edit an existing video with AI (``video_url`` + ``editing_style``)."""

    path = "/api/ai_editing/"
    name = "AI editing"
    poll_interval = 5.0
    max_attempts = 120
