from typing import Any, Optional


class CreatifyError(Exception):
    """Base exception for all Creatify SDK errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(CreatifyError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, message: str, data: Any = None):
        super().__init__(message)
        self.status = status
        self.data = data

    def __str__(self) -> str:
        return f"HTTP {self.status}: {self.message}"


class AuthenticationError(ApiError):
    """Raised when the API ID or key is rejected (401/403)."""


class NotFoundError(ApiError):
    """Raised when the requested resource does not exist (404)."""


class RateLimitError(ApiError):
    """Raised when the workspace is being throttled (429)."""


class TransportError(CreatifyError):
    """No response was received from the API server."""


class ResponseParseError(CreatifyError):
    """The API answered but the body is not valid JSON or not the expected shape.

    ``status`` is ``None`` when the body was rejected after the HTTP layer
    had already accepted it.
    """

    def __init__(self, status: Optional[int], body: str, message: Optional[str] = None):
        super().__init__(message or f"Could not parse response body (HTTP {status})")
        self.status = status
        self.body = body


class PollTimeoutError(CreatifyError):
    """Raised when a task does not reach a terminal state within max_attempts polls."""

    def __init__(self, task_id: str, attempts: int, message: Optional[str] = None):
        super().__init__(
            message or f"Task {task_id} did not complete within the timeout period"
        )
        self.task_id = task_id
        self.attempts = attempts


class VideoCreationError(CreatifyError):
    """Raised by VideoCreator when a video cannot be produced."""

    def __init__(self, message: str, task_id: Optional[str] = None):
        super().__init__(message)
        self.task_id = task_id
