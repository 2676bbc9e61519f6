"""Temporal worker for relationship detection runs.

Connects to the configured Temporal server (retrying on startup) and polls
the relationships task queue.
"""

import asyncio

from temporalio.client import Client
from temporalio.worker import Worker

from warmpath.core.config import settings
from warmpath.temporal.activities.relationship_detection import detect_relationships
from warmpath.temporal.workflows.relationship_detection import RelationshipDetectionWorkflow
from warmpath.utils.logging import get_logger

logger = get_logger(__name__)

MAX_CONNECT_RETRIES = 5
CONNECT_RETRY_DELAY_SECONDS = 5


async def connect_with_retries() -> Client:
    """Connect to Temporal, retrying a few times before giving up."""
    target = f"{settings.temporal_host}:{settings.temporal_port}"
    for attempt in range(MAX_CONNECT_RETRIES):
        try:
            logger.info(f"Connecting to Temporal server at {target} (Attempt {attempt + 1}/{MAX_CONNECT_RETRIES})")
            return await Client.connect(target, namespace=settings.temporal_namespace)
        except Exception as e:
            if attempt == MAX_CONNECT_RETRIES - 1:
                logger.error(f"Failed to connect to Temporal server after {MAX_CONNECT_RETRIES} attempts: {e}")
                raise
            logger.warning(f"Connection attempt {attempt + 1} failed: {e}. Retrying in {CONNECT_RETRY_DELAY_SECONDS}s...")
            await asyncio.sleep(CONNECT_RETRY_DELAY_SECONDS)


def build_worker(client: Client) -> Worker:
    """Worker for the relationship detection workflow and activity."""
    return Worker(
        client,
        task_queue=settings.temporal_task_queue,
        workflows=[RelationshipDetectionWorkflow],
        activities=[detect_relationships],
        # Full-replace writes must not interleave
        max_concurrent_activities=1,
    )


async def main():
    """Start the Temporal worker."""
    client = await connect_with_retries()
    worker = build_worker(client)
    logger.info(f"Worker polling task queue '{settings.temporal_task_queue}'")
    await worker.run()


def run():
    """Console entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Worker stopped by user")


if __name__ == "__main__":
    run()
