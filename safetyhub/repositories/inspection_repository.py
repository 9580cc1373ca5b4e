"""점검 레포지토리 — 점검/응답 DB 쿼리 담당.

Inspection Repository — Handles all inspections and inspection_responses
database queries, including the open-inspection lookup used by start and
the compare-and-set used to freeze an inspection on submission.
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from safetyhub.models.checklist import Checklist, ChecklistItem
from safetyhub.models.inspection import Inspection, InspectionResponse
from safetyhub.repositories.base import BaseRepository


class InspectionRepository(BaseRepository[Inspection]):
    """점검 레포지토리.

    Inspection repository with open-inspection lookups, submission
    compare-and-set and response persistence.

    Extends:
        BaseRepository[Inspection]
    """

    def __init__(self) -> None:
        super().__init__(Inspection)

    async def get_open_for_inspector(
        self,
        db: AsyncSession,
        inspector_id: UUID,
        checklist_id: UUID,
    ) -> Inspection | None:
        """점검자+체크리스트 조합의 미제출 점검을 조회합니다.

        Retrieve the open (not yet submitted) inspection for an
        (inspector, checklist) pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            inspector_id: 점검자 UUID (Inspector UUID)
            checklist_id: 체크리스트 UUID (Checklist UUID)

        Returns:
            Inspection | None: 미제출 점검 또는 None (Open inspection or None)
        """
        query: Select = select(Inspection).where(
            Inspection.inspector_id == inspector_id,
            Inspection.checklist_id == checklist_id,
            Inspection.submitted_at.is_(None),
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_with_checklist(
        self,
        db: AsyncSession,
        inspection_id: UUID,
    ) -> Inspection | None:
        """점검을 체크리스트(항목 포함)와 함께 조회합니다.

        Retrieve an inspection with its checklist and checklist items.
        """
        query: Select = (
            select(Inspection)
            .where(Inspection.id == inspection_id)
            .options(selectinload(Inspection.checklist).selectinload(Checklist.items))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_for_inspector(
        self,
        db: AsyncSession,
        inspector_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Inspection], int]:
        """점검자의 점검 목록을 최신순으로 조회합니다.

        List an inspector's inspections, newest first.
        """
        query: Select = (
            select(Inspection)
            .where(Inspection.inspector_id == inspector_id)
            .options(selectinload(Inspection.checklist))
            .order_by(Inspection.started_at.desc())
            .execution_options(populate_existing=True)
        )
        return await self.get_paginated(db, query, page, per_page)

    async def mark_submitted(
        self,
        db: AsyncSession,
        inspection_id: UUID,
        submitted_at: datetime,
    ) -> bool:
        """미제출 상태일 때만 제출 일시를 기록합니다 (compare-and-set).

        Set ``submitted_at`` only if it is still null. Returns False when
        another call already submitted the inspection.
        """
        stmt = (
            update(Inspection)
            .where(Inspection.id == inspection_id, Inspection.submitted_at.is_(None))
            .values(submitted_at=submitted_at)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        return result.rowcount == 1

    async def create_responses(
        self,
        db: AsyncSession,
        rows: list[dict],
    ) -> list[InspectionResponse]:
        """응답 레코드를 일괄 생성합니다.

        Bulk-insert response rows with a single flush.
        """
        responses: list[InspectionResponse] = [InspectionResponse(**row) for row in rows]
        db.add_all(responses)
        await db.flush()
        return responses

    async def get_responses_with_items(
        self,
        db: AsyncSession,
        inspection_id: UUID,
    ) -> list[tuple[InspectionResponse, ChecklistItem]]:
        """저장된 응답을 체크리스트 항목과 조인하여 제출 순서대로 조회합니다.

        Read persisted responses joined with their checklist items, in
        submitted order. This is the single source of truth for escalation,
        stats and reports.
        """
        query: Select = (
            select(InspectionResponse, ChecklistItem)
            .join(ChecklistItem, InspectionResponse.item_id == ChecklistItem.id)
            .where(InspectionResponse.inspection_id == inspection_id)
            .order_by(InspectionResponse.position, InspectionResponse.created_at)
        )
        result = await db.execute(query)
        return [(row[0], row[1]) for row in result.all()]


# 싱글턴 인스턴스 — Singleton instance
inspection_repository: InspectionRepository = InspectionRepository()
