"""시정 조치 서비스 — 시정 조치 조회.

Corrective Action Service — Listing of corrective actions. Actions are
created only by the escalator; this service reads them.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.corrective_action import CorrectiveAction
from safetyhub.models.user import MANAGER_LEVEL, User
from safetyhub.repositories.corrective_action_repository import corrective_action_repository


class CorrectiveActionService:

    async def list_actions(
        self,
        db: AsyncSession,
        user: User,
        status: str | None = None,
        inspection_id: UUID | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[CorrectiveAction], int]:
        """시정 조치 목록 조회 — 관리자는 전체, 그 외는 본인이 생성한 조치만.

        Manager-level users see every action; others see the actions
        raised by their own inspections.
        """
        created_by: UUID | None = None if user.has_level(MANAGER_LEVEL) else user.id
        return await corrective_action_repository.get_by_filters(
            db,
            created_by=created_by,
            inspection_id=inspection_id,
            status=status,
            page=page,
            per_page=per_page,
        )

    def build_response(self, action: CorrectiveAction) -> dict:
        return {
            "id": str(action.id),
            "inspection_id": str(action.inspection_id) if action.inspection_id else None,
            "action_plan": action.action_plan,
            "corrective_action": action.corrective_action,
            "responsible_officer": str(action.responsible_officer) if action.responsible_officer else None,
            "target_date": action.target_date,
            "priority": action.priority,
            "status": action.status,
            "attachments": list(action.attachments or []),
            "created_by": str(action.created_by),
            "created_at": action.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
corrective_action_service: CorrectiveActionService = CorrectiveActionService()
