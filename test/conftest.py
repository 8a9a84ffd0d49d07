from collections import defaultdict
from typing import Any, AsyncGenerator, Optional

import pytest
import pytest_asyncio
from mock_server import CreatifyMockServer

from creatify_client import ClientOptions, Creatify

BASE_URL_TEMPLATE = "http://localhost:{}"


class FakeApiClient:
    """In-memory ApiClient: canned responses per (method, path).

    Responses are consumed in order; the last one keeps being returned.
    An Exception instance as a response is raised instead of returned.
    """

    def __init__(self):
        self.calls: list[tuple[str, str, Any]] = []
        self.responses: dict[tuple[str, str], list[Any]] = defaultdict(list)

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.responses[(method, path)].extend(responses)

    def count(self, method: str, path: str) -> int:
        return sum(1 for m, p, _ in self.calls if (m, p) == (method, path))

    async def _respond(self, method: str, path: str, payload: Any) -> Any:
        self.calls.append((method, path, payload))
        queue = self.responses.get((method, path))
        if not queue:
            raise AssertionError(f"Unexpected request {method} {path}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def get(self, path: str, params: Optional[dict] = None) -> Any:
        return await self._respond("GET", path, params)

    async def post(self, path: str, json: Optional[dict] = None) -> Any:
        return await self._respond("POST", path, json)

    async def put(self, path: str, json: Optional[dict] = None) -> Any:
        return await self._respond("PUT", path, json)

    async def delete(self, path: str, params: Optional[dict] = None) -> Any:
        return await self._respond("DELETE", path, params)


class RecordingSleep:
    """Stand-in for asyncio.sleep that returns immediately and remembers delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_http() -> FakeApiClient:
    return FakeApiClient()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def options() -> ClientOptions:
    return ClientOptions(api_id="test-id", api_key="test-key")


@pytest.fixture
def fake_client(options, fake_http) -> Creatify:
    return Creatify(options, http=fake_http)


@pytest_asyncio.fixture
async def server(unused_tcp_port_factory) -> AsyncGenerator[tuple[CreatifyMockServer, str], None]:
    """Start a mock Creatify API on a random port and yield it with its base URL."""
    port = unused_tcp_port_factory()
    server_instance = CreatifyMockServer(completion_polls=2)
    await server_instance.start(port=port)
    try:
        yield server_instance, BASE_URL_TEMPLATE.format(port)
    finally:
        await server_instance.stop()


@pytest_asyncio.fixture
async def live_client(server) -> AsyncGenerator[Creatify, None]:
    _, base_url = server
    client = Creatify.from_credentials("test-id", "test-key", base_url=base_url)
    try:
        yield client
    finally:
        await client.close()
