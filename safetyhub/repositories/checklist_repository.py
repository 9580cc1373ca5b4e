"""체크리스트 레포지토리 — 체크리스트 카탈로그 DB 쿼리 담당.

Checklist Repository — Handles checklists and checklist_items queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from safetyhub.models.checklist import Checklist, ChecklistItem
from safetyhub.repositories.base import BaseRepository


class ChecklistRepository(BaseRepository[Checklist]):
    """체크리스트 레포지토리.

    Checklist repository with item eager-loading and active filtering.

    Extends:
        BaseRepository[Checklist]
    """

    def __init__(self) -> None:
        super().__init__(Checklist)

    async def get_with_items(
        self,
        db: AsyncSession,
        checklist_id: UUID,
        active_only: bool = False,
    ) -> Checklist | None:
        """체크리스트를 항목과 함께 조회합니다.

        Retrieve a checklist with its items eagerly loaded.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            checklist_id: 체크리스트 UUID (Checklist UUID)
            active_only: True이면 비활성 체크리스트는 None 반환
                         (Return None for inactive checklists when True)

        Returns:
            Checklist | None: 항목 포함 체크리스트 또는 None
        """
        query: Select = (
            select(Checklist)
            .where(Checklist.id == checklist_id)
            .options(selectinload(Checklist.items))
            .execution_options(populate_existing=True)
        )
        if active_only:
            query = query.where(Checklist.is_active.is_(True))

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_active(self, db: AsyncSession) -> Sequence[tuple[Checklist, int]]:
        """활성 체크리스트 목록과 항목 수를 조회합니다.

        List active checklists with their item counts, ordered by name.
        """
        item_count = (
            select(func.count(ChecklistItem.id))
            .where(ChecklistItem.checklist_id == Checklist.id)
            .correlate(Checklist)
            .scalar_subquery()
        )
        query: Select = (
            select(Checklist, item_count)
            .where(Checklist.is_active.is_(True))
            .order_by(Checklist.name)
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def add_items(
        self,
        db: AsyncSession,
        checklist: Checklist,
        items: list[dict],
    ) -> list[ChecklistItem]:
        """체크리스트에 항목을 일괄 추가합니다.

        Bulk-add items to a checklist, assigning sort_order in input order.
        """
        created: list[ChecklistItem] = []
        for index, item in enumerate(items):
            row = ChecklistItem(
                checklist_id=checklist.id,
                text=item["text"],
                critical=item.get("critical", False),
                sort_order=item.get("sort_order", index),
            )
            db.add(row)
            created.append(row)
        await db.flush()
        return created


# 싱글턴 인스턴스 — Singleton instance
checklist_repository: ChecklistRepository = ChecklistRepository()
