from creatify_client.resources.base import TaskResource


class TextToSpeechResource(TaskResource):
    """Convert a script into an audio file.

    ``create`` expects ``{"script": ..., "accent": <accent id>}``; the
    finished task carries the audio URL in ``output``.
    """

    path = "/api/text_to_speech/"
    name = "Text-to-speech"
    poll_interval = 5.0
    max_attempts = 60
