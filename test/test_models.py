import pytest
from pydantic import ValidationError

from creatify_client import ClientOptions, PollPolicy, Task, TaskState, normalize_status
from creatify_client.models import BatchError, BatchResult, DyoaTask


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("pending", TaskState.pending),
        ("in_queue", TaskState.pending),
        ("running", TaskState.processing),
        ("processing", TaskState.processing),
        ("done", TaskState.done),
        ("completed", TaskState.done),
        ("error", TaskState.failed),
        ("failed", TaskState.failed),
        ("Done", TaskState.pending),
        ("approved", TaskState.pending),
        (None, TaskState.pending),
    ],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) is expected


def test_task_state_is_derived_from_status_and_snapshot_is_frozen():
    task = Task.model_validate({"id": "t1", "status": "completed", "output": "https://x/y.mp4"})

    assert task.state is TaskState.done
    assert task.is_terminal
    with pytest.raises(ValidationError):
        task.status = "pending"


def test_task_keeps_unknown_fields():
    task = Task.model_validate({"id": "t1", "status": "done", "media_job": "abc"})

    assert task.media_job == "abc"


def test_timed_out_snapshot():
    task = DyoaTask.timed_out("d1", created_at="2024-01-01T00:00:00Z")

    assert isinstance(task, DyoaTask)
    assert task.status == "error"
    assert task.success is False
    assert task.is_failed
    assert "timeout period" in task.error_message
    assert task.created_at == "2024-01-01T00:00:00Z"


def test_batch_result_all_successful_tracks_errors():
    result = BatchResult()
    assert result.all_successful

    result.errors.append(BatchError(index=2, error=RuntimeError("x")))
    assert result.all_successful is False


def test_poll_policy_rejects_negative_values():
    with pytest.raises(ValidationError):
        PollPolicy(poll_interval=-1)
    with pytest.raises(ValidationError):
        PollPolicy(max_attempts=-1)


def test_client_options_defaults():
    options = ClientOptions(api_id="id", api_key="key", base_url="https://example.com/")

    assert options.base_url == "https://example.com"
    assert options.timeout == 30.0


def test_client_options_require_credentials():
    with pytest.raises(ValidationError):
        ClientOptions(api_id="", api_key="key")


def test_client_options_from_env(monkeypatch):
    monkeypatch.setenv("CREATIFY_API_ID", "env-id")
    monkeypatch.setenv("CREATIFY_API_KEY", "env-key")
    monkeypatch.setenv("CREATIFY_TIMEOUT", "12.5")
    monkeypatch.delenv("CREATIFY_BASE_URL", raising=False)

    options = ClientOptions.from_env(api_key="override")

    assert options.api_id == "env-id"
    assert options.api_key == "override"
    assert options.timeout == 12.5
    assert options.base_url == "https://api.creatify.ai"
