"""Workspace endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.models.workspace import Workspace
from app.schemas.workspace import WorkspaceListResponse, WorkspaceResponse

router = APIRouter()


@router.get("/", response_model=WorkspaceListResponse)
async def list_workspaces(
    db: Annotated[AsyncSession, Depends(get_db)],
    workspace_type: str | None = Query(default=None, alias="type"),
    resource_category: str | None = None,
    min_capacity: int | None = Query(default=None, ge=1),
    available: bool = True,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> WorkspaceListResponse:
    """List bookable workspaces with optional filters."""
    query = select(Workspace).where(Workspace.available == available)
    if workspace_type:
        query = query.where(Workspace.type == workspace_type)
    if resource_category:
        query = query.where(Workspace.resource_category == resource_category)
    if min_capacity:
        query = query.where(Workspace.capacity >= min_capacity)

    # Count
    count_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = count_result.scalar() or 0

    # Pagination
    offset = (page - 1) * page_size
    query = query.order_by(Workspace.name).offset(offset).limit(page_size)
    result = await db.execute(query)

    return WorkspaceListResponse(
        workspaces=[WorkspaceResponse.model_validate(w) for w in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )
