from creatify_client.resources.base import TaskResource


class CustomTemplatesResource(TaskResource):
    path = "/api/custom_templates/"
    name = "Custom template"
    poll_interval = 5.0
    max_attempts = 120
