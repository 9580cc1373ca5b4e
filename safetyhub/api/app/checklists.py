"""체크리스트 라우터 — 활성 체크리스트 카탈로그 조회 API.

Checklist Router — Read-only catalog endpoints for inspectors.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.api.deps import get_current_user
from safetyhub.database import get_db
from safetyhub.models.user import User
from safetyhub.schemas.checklist import ChecklistDetailResponse, ChecklistResponse
from safetyhub.services.catalog_service import catalog_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ChecklistResponse])
async def list_checklists(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> list[dict]:
    """활성 체크리스트 목록을 조회합니다 (항목 수 포함).

    List active checklists with item counts.
    """
    return await catalog_service.list_active(db)


@router.get("/{checklist_id}", response_model=ChecklistDetailResponse)
async def get_checklist(
    checklist_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """활성 체크리스트를 항목과 함께 조회합니다. 비활성이면 404."""
    checklist = await catalog_service.get_active_checklist(db, checklist_id)
    return catalog_service.build_detail(checklist)
