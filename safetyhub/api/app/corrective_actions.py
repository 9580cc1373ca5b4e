"""시정 조치 라우터 — 시정 조치 목록 API.

Corrective Action Router — Lists corrective actions derived from
inspections. Manager-level users see all actions; others see their own.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.api.deps import get_current_user
from safetyhub.database import get_db
from safetyhub.models.user import User
from safetyhub.schemas.corrective_action import CorrectiveActionPage
from safetyhub.services.corrective_action_service import corrective_action_service

router: APIRouter = APIRouter()


@router.get("", response_model=CorrectiveActionPage)
async def list_corrective_actions(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    status: Annotated[str | None, Query()] = None,
    inspection_id: Annotated[UUID | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """시정 조치 목록 조회 (상태/점검 필터)."""
    actions, total = await corrective_action_service.list_actions(
        db, current_user, status=status, inspection_id=inspection_id, page=page, per_page=per_page
    )
    return {
        "items": [corrective_action_service.build_response(a) for a in actions],
        "total": total,
        "page": page,
        "per_page": per_page,
    }
