import pytest

from creatify_client import (
    PollPolicy,
    PollTimeoutError,
    Task,
    TaskPoller,
    TaskState,
    TimeoutPolicy,
)


def scripted_fetch(*statuses: str):
    """Return a fetch_status coroutine that walks through ``statuses``.

    The last status repeats once the script runs out. The list of task ids
    it was called with is exposed as ``fetch.calls``.
    """
    remaining = list(statuses)

    async def fetch(task_id: str) -> Task:
        fetch.calls.append(task_id)
        status = remaining.pop(0) if len(remaining) > 1 else remaining[0]
        payload = {"id": task_id, "status": status, "created_at": "2024-01-01T00:00:00Z"}
        if status == "done":
            payload["output"] = f"https://cdn.example.com/{task_id}.mp4"
        return Task.model_validate(payload)

    fetch.calls = []
    return fetch


def creator(task_id: str = "task-1"):
    async def create():
        create.calls += 1
        return {"id": task_id, "status": "pending"}

    create.calls = 0
    return create


@pytest.mark.asyncio
async def test_immediately_done_returns_without_waiting(recording_sleep):
    """A task that is terminal on the first check is returned with zero polls."""
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("done")
    create = creator()

    result = await poller.wait_for(create, fetch, PollPolicy(poll_interval=1, max_attempts=5))

    assert result.state is TaskState.done
    assert create.calls == 1
    assert fetch.calls == ["task-1"]
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_polls_until_done(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("pending", "pending", "done")

    result = await poller.wait_for(
        creator(), fetch, PollPolicy(poll_interval=0.1, max_attempts=5)
    )

    assert result.is_done
    assert result.output == "https://cdn.example.com/task-1.mp4"
    assert len(fetch.calls) == 3
    assert recording_sleep.delays == [0.1, 0.1]


@pytest.mark.asyncio
async def test_return_error_task_on_timeout(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("pending")
    policy = PollPolicy(
        poll_interval=0.1, max_attempts=2, on_timeout=TimeoutPolicy.return_error_task
    )

    result = await poller.wait_for(creator(), fetch, policy)

    assert len(fetch.calls) == 3
    assert result.id == "task-1"
    assert result.status == "error"
    assert result.state is TaskState.failed
    assert result.success is False
    assert "did not complete within the timeout period" in result.error_message
    assert result.created_at == "2024-01-01T00:00:00Z"


@pytest.mark.asyncio
async def test_raise_on_timeout(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("processing")

    with pytest.raises(PollTimeoutError) as excinfo:
        await poller.wait_for(creator("slow"), fetch, PollPolicy(poll_interval=0, max_attempts=3))

    assert excinfo.value.task_id == "slow"
    assert excinfo.value.attempts == 3
    assert len(fetch.calls) == 4


@pytest.mark.asyncio
@pytest.mark.parametrize("max_attempts", [0, 1, 4])
async def test_never_fetches_more_than_max_attempts_plus_one(recording_sleep, max_attempts):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("in_queue")
    policy = PollPolicy(
        poll_interval=0, max_attempts=max_attempts, on_timeout=TimeoutPolicy.return_error_task
    )

    await poller.poll("task-1", fetch, policy)

    assert len(fetch.calls) == max_attempts + 1
    assert len(recording_sleep.delays) == max_attempts


@pytest.mark.asyncio
async def test_zero_attempts_applies_timeout_policy_after_single_check(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("pending")

    with pytest.raises(PollTimeoutError):
        await poller.poll("task-1", fetch, PollPolicy(poll_interval=5, max_attempts=0))

    assert fetch.calls == ["task-1"]
    assert recording_sleep.delays == []


@pytest.mark.asyncio
@pytest.mark.parametrize("terminal", ["error", "failed"])
async def test_remote_failure_is_returned_not_raised(recording_sleep, terminal):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("processing", terminal)

    result = await poller.poll("task-1", fetch, PollPolicy(poll_interval=0, max_attempts=5))

    assert result.status == terminal
    assert result.is_failed


@pytest.mark.asyncio
async def test_completed_spelling_is_terminal(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("running", "completed")

    result = await poller.poll("task-1", fetch, PollPolicy(poll_interval=0, max_attempts=5))

    assert result.is_done
    assert len(fetch.calls) == 2


@pytest.mark.asyncio
async def test_unrecognized_and_miscased_statuses_keep_polling(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("DONE", "rendering", "done")

    result = await poller.poll("task-1", fetch, PollPolicy(poll_interval=0, max_attempts=5))

    assert result.status == "done"
    assert len(fetch.calls) == 3


@pytest.mark.asyncio
async def test_fetch_errors_propagate_without_retry(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    calls = []

    async def fetch(task_id):
        calls.append(task_id)
        if len(calls) == 2:
            raise ConnectionError("network blip")
        return Task(id=task_id, status="pending")

    with pytest.raises(ConnectionError):
        await poller.poll("task-1", fetch, PollPolicy(poll_interval=0, max_attempts=5))

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_custom_predicate_replaces_terminal_check(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("draft", "approved")

    result = await poller.poll(
        "dyoa-1",
        fetch,
        PollPolicy(poll_interval=0, max_attempts=5),
        until=lambda task: task.status == "approved",
    )

    assert result.status == "approved"
    assert len(fetch.calls) == 2


@pytest.mark.asyncio
async def test_create_errors_propagate_before_polling(recording_sleep):
    poller = TaskPoller(sleep=recording_sleep)
    fetch = scripted_fetch("done")

    async def create():
        raise ValueError("bad params")

    with pytest.raises(ValueError):
        await poller.wait_for(create, fetch)

    assert fetch.calls == []
