import asyncio

from loguru import logger
from mock_server import CreatifyMockServer

from creatify_client import (
    BatchOptions,
    BatchProcessor,
    ClientOptions,
    Creatify,
    CreatifyError,
    PollTimeoutError,
)


async def main():
    PORT = 8000
    server = CreatifyMockServer(completion_polls=3, failing={"ai_shorts"})
    await server.start(port=PORT)
    print(f"Mock API started on http://localhost:{PORT}")

    options = ClientOptions(
        api_id="test-id", api_key="test-key", base_url=f"http://localhost:{PORT}", debug=True
    )
    logger.info("Package logging enabled through ClientOptions(debug=True)")

    async with Creatify(options) as client:
        try:
            credits = await client.workspace.remaining_credits()
            print(f"Remaining credits: {credits.remaining_credits}")

            task = await client.avatar.create_and_wait(
                {"text": "Hello from the example!", "creator": "avatar-1"},
                poll_interval=0.5,
                max_attempts=10,
            )
            print(f"Lipsync {task.id} finished as {task.state.value}: {task.output}")

            shorts = await client.ai_shorts.create_and_wait(
                {"prompt": "A cat reviewing headphones", "aspect_ratio": "9:16"},
                poll_interval=0.5,
            )
            print(f"AI shorts {shorts.id} ended as {shorts.status}: {shorts.error_message}")

            processor = BatchProcessor(client)
            result = await processor.process_avatar_batch(
                [
                    {"text": f"Clip number {n}", "avatar_id": "avatar-1", "aspect_ratio": "9:16"}
                    for n in range(5)
                ],
                BatchOptions(concurrency=2, continue_on_error=True, task_start_delay=0.2),
            )
            print(
                f"Batch: {len(result.successes)} succeeded, {len(result.errors)} failed, "
                f"all successful: {result.all_successful}"
            )
        except PollTimeoutError as e:
            print(f"Polling timed out: {e}")
        except CreatifyError as e:
            print(f"Error occurred: {e}")

    await server.stop()


if __name__ == "__main__":
    asyncio.run(main())
