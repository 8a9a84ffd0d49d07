from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

T = TypeVar("T")


class TaskState(str, Enum):
    pending = "pending"
    processing = "processing"
    done = "done"
    failed = "failed"


_STATUS_MAP = {
    "pending": TaskState.pending,
    "in_queue": TaskState.pending,
    "processing": TaskState.processing,
    "running": TaskState.processing,
    "done": TaskState.done,
    "completed": TaskState.done,
    "error": TaskState.failed,
    "failed": TaskState.failed,
}


def normalize_status(raw: Optional[str]) -> TaskState:
    """Map a remote status spelling onto one of the four canonical states.

    Matching is exact and case-sensitive. Anything unrecognized is treated
    as pending so that pollers keep going until their attempts run out.
    """
    return _STATUS_MAP.get(raw, TaskState.pending)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class Task(BaseModel):
    """One snapshot of a remote asynchronous job.

    ``status`` keeps the spelling the API used; ``state`` is the canonical
    variant derived from it when the snapshot is parsed. Snapshots are
    frozen: every poll yields a new instance.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    status: Optional[str] = None
    state: TaskState = TaskState.pending
    output: Any = None
    error_message: Optional[str] = None
    success: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _derive_state(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {**data, "state": normalize_status(data.get("status"))}
        return data

    @property
    def is_done(self) -> bool:
        return self.state is TaskState.done

    @property
    def is_failed(self) -> bool:
        return self.state is TaskState.failed

    @property
    def is_terminal(self) -> bool:
        return self.is_done or self.is_failed

    @classmethod
    def error_snapshot(
        cls, task_id: str, message: str, created_at: Optional[str] = None
    ):
        """Build a failed snapshot for a task the client could not observe."""
        now = _utcnow()
        return cls.model_validate(
            {
                "id": task_id,
                "status": "error",
                "error_message": message,
                "success": False,
                "created_at": created_at or now,
                "updated_at": now,
            }
        )

    @classmethod
    def timed_out(
        cls, task_id: str, message: Optional[str] = None, created_at: Optional[str] = None
    ):
        return cls.error_snapshot(
            task_id,
            message or f"Task {task_id} did not complete within the timeout period",
            created_at=created_at,
        )


class ScriptTask(Task):
    script: Optional[str] = None


class DyoaPhoto(ApiModel):
    id: str
    image: Optional[str] = None
    created_at: Optional[str] = None


class DyoaTask(Task):
    """DYOA records use their own lifecycle (initializing, draft, pending,
    approved, rejected), so callers poll them with an explicit predicate."""

    photos: list[DyoaPhoto] = Field(default_factory=list)


class AvatarInfo(ApiModel):
    id: str
    avatar_id: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None


class VoiceInfo(ApiModel):
    voice_id: str
    id: Optional[str] = None
    name: str = ""
    language: Optional[str] = None
    gender: Optional[str] = None


class MusicCategory(ApiModel):
    name: str


class MusicTrack(ApiModel):
    id: str
    name: str
    url: Optional[str] = None
    category: Optional[str] = None
    duration: Optional[float] = None


class RemainingCredits(ApiModel):
    remaining_credits: float = 0


class LinkData(ApiModel):
    id: str
    url: Optional[str] = None


class Page(ApiModel, Generic[T]):
    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: list[T] = Field(default_factory=list)


class VideoResult(BaseModel):
    url: str
    status: str
    task_id: str


class TimeoutPolicy(str, Enum):
    raise_error = "raise"
    return_error_task = "return_error_task"


class PollPolicy(BaseModel):
    poll_interval: float = Field(default=2.0, ge=0)
    max_attempts: int = Field(default=30, ge=0)
    on_timeout: TimeoutPolicy = TimeoutPolicy.raise_error


class BatchOptions(BaseModel):
    concurrency: int = Field(default=3, ge=1)
    continue_on_error: bool = False
    task_start_delay: float = Field(default=0.5, ge=0)
    raise_on_error: bool = False

    @model_validator(mode="after")
    def _check_error_flags(self) -> "BatchOptions":
        if self.raise_on_error and self.continue_on_error:
            raise ValueError("raise_on_error requires continue_on_error=False")
        return self


class BatchError(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    index: int
    error: Exception


class BatchResult(BaseModel, Generic[T]):
    """Aggregated outcome of a batch run.

    ``successes`` is in completion order, not submission order; use the
    ``index`` on each entry of ``errors`` to correlate failures back to the
    submitted task list.
    """

    successes: list[T] = Field(default_factory=list)
    errors: list[BatchError] = Field(default_factory=list)

    @computed_field
    @property
    def all_successful(self) -> bool:
        return not self.errors


class AvatarBatchItem(BaseModel):
    text: str
    avatar_id: str
    voice_id: Optional[str] = None
    aspect_ratio: Optional[str] = None


class TextToSpeechBatchItem(BaseModel):
    script: str
    accent: str


class AiEditingBatchItem(BaseModel):
    video_url: str
    editing_style: str


class AiShortsBatchItem(BaseModel):
    prompt: str
    aspect_ratio: str
    target_platform: Optional[str] = None
    target_audience: Optional[str] = None
    language: Optional[str] = None


class AiScriptsBatchItem(BaseModel):
    prompt: str
    target_platform: Optional[str] = None
    target_audience: Optional[str] = None
    language: Optional[str] = None
    script_length: Optional[int] = None


class LipsyncV2BatchItem(BaseModel):
    video_inputs: list[dict[str, Any]]
    aspect_ratio: Optional[str] = None
