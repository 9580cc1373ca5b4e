"""관리자 체크리스트 라우터 — 체크리스트 카탈로그 관리 API.

Admin Checklist Router — Create checklists with items and rename or
(de)activate them. Manager level and above.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.api.deps import require_manager
from safetyhub.database import get_db
from safetyhub.models.user import User
from safetyhub.schemas.checklist import ChecklistCreate, ChecklistDetailResponse, ChecklistUpdate
from safetyhub.services.catalog_service import catalog_service

router: APIRouter = APIRouter()


@router.post("", response_model=ChecklistDetailResponse, status_code=201)
async def create_checklist(
    data: ChecklistCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> dict:
    """체크리스트를 항목과 함께 생성합니다.

    Create a checklist together with its items.

    Args:
        data: 체크리스트 생성 데이터 (Checklist creation data)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 관리자 레벨 사용자 (Manager-level user)

    Returns:
        dict: 생성된 체크리스트 상세 (Created checklist detail)
    """
    checklist = await catalog_service.create_checklist(db, data)
    result: dict = catalog_service.build_detail(checklist)
    await db.commit()
    return result


@router.patch("/{checklist_id}", response_model=ChecklistDetailResponse)
async def update_checklist(
    checklist_id: UUID,
    data: ChecklistUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_manager)],
) -> dict:
    """체크리스트 이름/분류/활성 상태를 수정합니다."""
    checklist = await catalog_service.update_checklist(db, checklist_id, data)
    result: dict = catalog_service.build_detail(checklist)
    await db.commit()
    return result
