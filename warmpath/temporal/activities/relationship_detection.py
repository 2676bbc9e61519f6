"""Relationship detection activity."""

from datetime import date
from typing import Dict, Optional

from temporalio import activity

from warmpath.core.database import get_session_maker
from warmpath.pipeline.relationship_detection import RelationshipDetectionPipeline
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)


@activity.defn
async def detect_relationships(payload: Optional[Dict] = None) -> Dict:
    """Run one detection pass and return its summary.

    Payload keys (all optional):
        as_of: ISO date used as the recency reference day
        replace_existing: False to keep prior edges and only add new pairs
    """
    payload = payload or {}
    as_of = date.fromisoformat(payload["as_of"]) if payload.get("as_of") else None
    replace_existing = payload.get("replace_existing", True)

    try:
        async with get_session_maker()() as session:
            pipeline = RelationshipDetectionPipeline(session)
            result = await pipeline.run(as_of=as_of, replace_existing=replace_existing)

        LOGGER.info(
            "Relationship detection activity completed",
            extra={
                "relationships_detected": result.relationships_detected,
                "relationships_stored": result.relationships_stored,
                "storage_errors": result.storage_errors,
            },
        )
        return result.model_dump(mode="json")
    except Exception as e:
        activity.logger.error(f"Relationship detection failed: {e}")
        raise
