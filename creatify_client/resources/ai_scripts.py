from creatify_client.models import ScriptTask, TimeoutPolicy
from creatify_client.resources.base import TaskResource


class AiScriptsResource(TaskResource):
    """Generate a video script from a prompt; the text lands in ``script``."""

    path = "/api/ai_scripts/"
    name = "AI Script"
    model = ScriptTask
    on_timeout = TimeoutPolicy.return_error_task
    tolerant_reads = True
