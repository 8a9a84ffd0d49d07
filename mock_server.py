import uuid
from datetime import datetime, timezone
from typing import Optional

from aiohttp import web
from loguru import logger


class CreatifyMockServer:
    """In-process stand-in for the Creatify API.

    Every ``/api/<family>/`` collection accepts POST to create a task and
    GET to list them. A task reports ``processing`` for its first
    ``completion_polls`` status checks and then ``done``, or ``error`` when
    its family is listed in ``failing``.
    """

    def __init__(
        self,
        api_id: str = "test-id",
        api_key: str = "test-key",
        completion_polls: int = 2,
        failing: Optional[set[str]] = None,
    ):
        self.api_id = api_id
        self.api_key = api_key
        self.completion_polls = completion_polls
        self.failing = failing or set()
        self.tasks: dict[str, dict] = {}
        self.polls: dict[str, int] = {}
        self.requests: list[tuple[str, str]] = []
        self.runner: Optional[web.AppRunner] = None
        self.logger = logger

        self.app = web.Application(middlewares=[self.check_credentials])
        self.app.router.add_get("/api/remaining_credits/", self.handle_credits)
        self.app.router.add_get("/api/broken/", self.handle_broken)
        self.app.router.add_route("*", "/api/echo/", self.handle_echo)
        self.app.router.add_get("/api/{family}/", self.handle_list)
        self.app.router.add_post("/api/{family}/", self.handle_create)
        self.app.router.add_get("/api/{family}/{task_id}/", self.handle_status)
        self.app.router.add_delete("/api/{family}/{task_id}/", self.handle_delete)
        self.app.router.add_post("/api/{family}/{task_id}/{action}/", self.handle_action)

    @web.middleware
    async def check_credentials(self, request: web.Request, handler):
        self.requests.append((request.method, request.path))
        if (
            request.headers.get("X-API-ID") != self.api_id
            or request.headers.get("X-API-KEY") != self.api_key
        ):
            self.logger.info("Rejecting request with bad credentials")
            return web.json_response({"message": "Invalid API credentials"}, status=401)
        return await handler(request)

    async def handle_credits(self, request: web.Request) -> web.Response:
        return web.json_response({"remaining_credits": 42})

    async def handle_broken(self, request: web.Request) -> web.Response:
        return web.Response(text="<html>upstream hiccup</html>", content_type="text/html")

    async def handle_echo(self, request: web.Request) -> web.Response:
        body = await request.json() if request.can_read_body else None
        return web.json_response(
            {
                "method": request.method,
                "query": dict(request.query),
                "content_type": request.headers.get("Content-Type"),
                "body": body,
            }
        )

    async def handle_create(self, request: web.Request) -> web.Response:
        family = request.match_info["family"]
        task_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        self.tasks[task_id] = {
            "id": task_id,
            "family": family,
            "status": "pending",
            "success": True,
            "params": await request.json(),
            "created_at": now,
            "updated_at": now,
        }
        self.polls[task_id] = 0
        self.logger.info(f"Created {family} task {task_id}")
        return web.json_response(self._public(task_id))

    async def handle_list(self, request: web.Request) -> web.Response:
        family = request.match_info["family"]
        return web.json_response(
            [self._public(task_id) for task_id, task in self.tasks.items() if task["family"] == family]
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        task_id = request.match_info["task_id"]
        task = self.tasks.get(task_id)
        if task is None:
            return web.json_response({"detail": "Not found."}, status=404)

        self.polls[task_id] += 1
        if self.polls[task_id] > self.completion_polls:
            if task["family"] in self.failing:
                task.update(status="error", success=False, error_message="Rendering failed")
            else:
                task.update(status="done", output=f"https://cdn.example.com/{task_id}.mp4")
            self.logger.info(f"Returning {task['status']} status for {task_id}")
        else:
            task["status"] = "processing"
            self.logger.info(f"Returning processing status (poll {self.polls[task_id]})")
        return web.json_response(self._public(task_id))

    async def handle_delete(self, request: web.Request) -> web.Response:
        if self.tasks.pop(request.match_info["task_id"], None) is None:
            return web.json_response({"detail": "Not found."}, status=404)
        return web.Response(status=204)

    async def handle_action(self, request: web.Request) -> web.Response:
        task_id = request.match_info["task_id"]
        if task_id not in self.tasks:
            return web.json_response({"detail": "Not found."}, status=404)
        self.tasks[task_id]["last_action"] = request.match_info["action"]
        return web.json_response(self._public(task_id))

    def _public(self, task_id: str) -> dict:
        return {key: value for key, value in self.tasks[task_id].items() if key != "family"}

    async def start(self, port: int = 8080) -> web.TCPSite:
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, "localhost", port)
        await site.start()
        self.logger.info(f"Mock Creatify API started on port {port}")
        return site

    async def stop(self) -> None:
        if self.runner is not None:
            await self.runner.cleanup()
            self.runner = None
