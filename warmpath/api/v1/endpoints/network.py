"""Warm-introduction network API endpoints."""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warmpath.core.database import get_async_session
from warmpath.core.exceptions import OrganizationNotFoundError
from warmpath.schemas.network import IntroPath, NetworkOverviewItem, NetworkPath
from warmpath.services.network_service import NetworkService

router = APIRouter()


def get_network_service(session: AsyncSession = Depends(get_async_session)) -> NetworkService:
    return NetworkService(session)


@router.get(
    "/overview",
    response_model=List[NetworkOverviewItem],
    summary="Connection counts per organization",
    operation_id="get_network_overview",
)
async def get_network_overview(
    service: NetworkService = Depends(get_network_service),
) -> List[NetworkOverviewItem]:
    return await service.get_network_overview()


@router.get(
    "/organizations/{organization_id}",
    response_model=NetworkPath,
    summary="Introduction paths into an organization",
    operation_id="get_organization_network",
)
async def get_organization_network(
    organization_id: UUID,
    service: NetworkService = Depends(get_network_service),
) -> NetworkPath:
    try:
        return await service.get_network_graph(organization_id)
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "/organizations/{organization_id}/best-path",
    response_model=Optional[IntroPath],
    summary="Strongest introduction path into an organization",
    operation_id="get_best_intro_path",
)
async def get_best_intro_path(
    organization_id: UUID,
    service: NetworkService = Depends(get_network_service),
) -> Optional[IntroPath]:
    try:
        return await service.get_best_intro_path(organization_id)
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
