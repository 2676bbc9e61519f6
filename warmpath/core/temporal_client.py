"""Temporal client connection management and workflow starters."""

from datetime import timedelta
from typing import Dict, Optional

from temporalio.client import Client as TemporalClient
from temporalio.client import WorkflowHandle
from temporalio.common import WorkflowIDConflictPolicy, WorkflowIDReusePolicy

from warmpath.core.config import settings
from warmpath.temporal.constants import (
    DEFAULT_WORKFLOW_TIMEOUT_SECONDS,
    RELATIONSHIP_DETECTION_WORKFLOW_ID,
)
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TemporalClientManager:
    """Lazily creates a Temporal client and keeps it around for reuse."""

    _client: Optional[TemporalClient] = None

    async def get_client(self) -> TemporalClient:
        """Get or create Temporal client instance."""
        if self._client is None:
            self._client = await TemporalClient.connect(
                f"{settings.temporal_host}:{settings.temporal_port}",
                namespace=settings.temporal_namespace,
            )
        return self._client


_temporal_manager = TemporalClientManager()


async def get_temporal_client() -> TemporalClient:
    """FastAPI dependency returning the shared Temporal client."""
    return await _temporal_manager.get_client()


async def start_relationship_detection(
    client: TemporalClient, payload: Optional[Dict] = None
) -> WorkflowHandle:
    """Start a detection run under the fixed workflow id.

    Raises:
        temporalio.exceptions.WorkflowAlreadyStartedError: If a run is in flight
    """
    handle = await client.start_workflow(
        "RelationshipDetectionWorkflow",
        payload or {},
        id=RELATIONSHIP_DETECTION_WORKFLOW_ID,
        task_queue=settings.temporal_task_queue,
        id_conflict_policy=WorkflowIDConflictPolicy.FAIL,
        id_reuse_policy=WorkflowIDReusePolicy.ALLOW_DUPLICATE,
        execution_timeout=timedelta(seconds=DEFAULT_WORKFLOW_TIMEOUT_SECONDS),
    )
    LOGGER.info(
        "Started relationship detection workflow",
        extra={"workflow_id": handle.id, "run_id": handle.result_run_id},
    )
    return handle
