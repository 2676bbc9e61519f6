"""Relationship detection trigger endpoint."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from temporalio.client import Client
from temporalio.exceptions import WorkflowAlreadyStartedError

from warmpath.core.temporal_client import get_temporal_client, start_relationship_detection
from warmpath.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


class DetectionRequest(BaseModel):
    as_of: Optional[date] = Field(None, description="Recency reference day (defaults to today)")
    replace_existing: bool = Field(
        True, description="Replace the previously detected edge set instead of only adding pairs"
    )


class DetectionStartedResponse(BaseModel):
    workflow_id: str
    run_id: Optional[str] = None
    status: str = "started"


@router.post(
    "/detect",
    response_model=DetectionStartedResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Start a relationship detection run",
    operation_id="start_relationship_detection",
)
async def detect_relationships(
    request: DetectionRequest,
    client: Client = Depends(get_temporal_client),
) -> DetectionStartedResponse:
    payload = {
        "as_of": request.as_of.isoformat() if request.as_of else None,
        "replace_existing": request.replace_existing,
    }
    try:
        handle = await start_relationship_detection(client, payload)
    except WorkflowAlreadyStartedError:
        LOGGER.warning("Relationship detection requested while a run is in flight")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A relationship detection run is already in progress",
        )
    return DetectionStartedResponse(workflow_id=handle.id, run_id=handle.result_run_id)
