"""시정 조치 레포지토리.

Corrective action repository — Handles corrective_actions DB queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.corrective_action import CorrectiveAction
from safetyhub.repositories.base import BaseRepository


class CorrectiveActionRepository(BaseRepository[CorrectiveAction]):

    def __init__(self) -> None:
        super().__init__(CorrectiveAction)

    async def get_by_filters(
        self,
        db: AsyncSession,
        created_by: UUID | None = None,
        inspection_id: UUID | None = None,
        status: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[CorrectiveAction], int]:
        query: Select = select(CorrectiveAction).order_by(CorrectiveAction.created_at.desc())
        if created_by is not None:
            query = query.where(CorrectiveAction.created_by == created_by)
        if inspection_id is not None:
            query = query.where(CorrectiveAction.inspection_id == inspection_id)
        if status:
            query = query.where(CorrectiveAction.status == status)
        return await self.get_paginated(db, query, page, per_page)


# 싱글턴 인스턴스 — Singleton instance
corrective_action_repository: CorrectiveActionRepository = CorrectiveActionRepository()
