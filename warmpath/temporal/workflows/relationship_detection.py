"""Relationship detection Temporal workflow."""

from datetime import timedelta
from typing import Dict, Optional

from temporalio import workflow
from temporalio.common import RetryPolicy

from warmpath.temporal.constants import DETECTION_ACTIVITY_TIMEOUT_SECONDS


@workflow.defn
class RelationshipDetectionWorkflow:
    """Schedules one detection pass over the current contact/organization snapshot."""

    def __init__(self):
        self._status = "initialized"
        self._summary: Optional[Dict] = None

    @workflow.query
    def get_status(self) -> dict:
        """Query handler for status updates."""
        return {"status": self._status, "summary": self._summary}

    @workflow.run
    async def run(self, payload: Optional[Dict] = None) -> dict:
        self._status = "running"
        try:
            self._summary = await workflow.execute_activity(
                "detect_relationships",
                args=[payload or {}],
                start_to_close_timeout=timedelta(seconds=DETECTION_ACTIVITY_TIMEOUT_SECONDS),
                retry_policy=RetryPolicy(maximum_attempts=3),
            )
        except Exception:
            self._status = "failed"
            raise

        self._status = "completed"
        return self._summary
