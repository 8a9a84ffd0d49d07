import asyncio
from typing import Awaitable, Callable, Generic, TypeVar

from loguru import logger

V = TypeVar("V")


def _retrieve_exception(task: asyncio.Task) -> None:
    # marks a failure as seen even when every waiter was cancelled
    if not task.cancelled():
        task.exception()


class LookupCache(Generic[V]):
    """Read-through cache of list lookups, keyed by kind (e.g. "avatars").

    Values live for as long as the cache does. Concurrent misses for the
    same kind share a single in-flight fetch; a fetch that raises is not
    cached, so the next caller retries it.
    """

    def __init__(self) -> None:
        self.logger = logger
        self._values: dict[str, V] = {}
        self._pending: dict[str, asyncio.Task] = {}

    def __contains__(self, kind: str) -> bool:
        return kind in self._values

    async def get_or_fetch(self, kind: str, fetch: Callable[[], Awaitable[V]]) -> V:
        if kind in self._values:
            return self._values[kind]

        pending = self._pending.get(kind)
        if pending is None:
            self.logger.debug(f"Cache miss for {kind!r}, fetching")
            pending = asyncio.ensure_future(self._load(kind, fetch))
            pending.add_done_callback(_retrieve_exception)
            self._pending[kind] = pending
        # shield so that one cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(pending)

    async def _load(self, kind: str, fetch: Callable[[], Awaitable[V]]) -> V:
        try:
            value = await fetch()
            self._values[kind] = value
            return value
        finally:
            self._pending.pop(kind, None)

    def __repr__(self) -> str:
        return f"<LookupCache kinds={sorted(self._values)}>"
