"""알림 라우터 — 내 알림 API.

Notification Router — The caller's in-app notifications.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.api.deps import get_current_user
from safetyhub.database import get_db
from safetyhub.models.notification import Notification
from safetyhub.models.user import User
from safetyhub.schemas.corrective_action import NotificationPage
from safetyhub.services.notification_service import notification_service

router: APIRouter = APIRouter()


def _to_response(n: Notification) -> dict:
    return {
        "id": str(n.id),
        "type": n.type,
        "message": n.message,
        "link": n.link,
        "reference_type": n.reference_type,
        "reference_id": str(n.reference_id) if n.reference_id else None,
        "is_read": n.is_read,
        "created_at": n.created_at,
    }


@router.get("", response_model=NotificationPage)
async def list_my_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """내 알림 목록 조회 (최신순).

    List my notifications, newest first.
    """
    notifications, total = await notification_service.list_notifications(db, current_user.id, page, per_page)
    return {
        "items": [_to_response(n) for n in notifications],
        "total": total,
        "page": page,
        "per_page": per_page,
    }
