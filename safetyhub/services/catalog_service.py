"""체크리스트 카탈로그 서비스.

Checklist Catalog Service — Read access for the inspection lifecycle
(``get_active_checklist``) plus the admin create/update operations.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.checklist import Checklist
from safetyhub.repositories.checklist_repository import checklist_repository
from safetyhub.schemas.checklist import ChecklistCreate, ChecklistUpdate
from safetyhub.utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class CatalogService:
    """체크리스트 카탈로그 서비스.

    Checklist catalog service. Checklists are immutable from the
    inspection subsystem's point of view.
    """

    async def get_active_checklist(
        self,
        db: AsyncSession,
        checklist_id: UUID,
    ) -> Checklist:
        """활성 체크리스트를 항목과 함께 조회합니다.

        Return an active checklist with its ordered items.

        Raises:
            NotFoundError: 체크리스트가 없거나 비활성 (Missing or inactive checklist)
        """
        checklist: Checklist | None = await checklist_repository.get_with_items(
            db, checklist_id, active_only=True
        )
        if checklist is None:
            raise NotFoundError("Checklist not found or inactive")
        return checklist

    async def get_checklist(self, db: AsyncSession, checklist_id: UUID) -> Checklist:
        checklist: Checklist | None = await checklist_repository.get_with_items(db, checklist_id)
        if checklist is None:
            raise NotFoundError("Checklist not found")
        return checklist

    async def list_active(self, db: AsyncSession) -> list[dict]:
        rows = await checklist_repository.list_active(db)
        return [self.build_response(checklist, count) for checklist, count in rows]

    async def create_checklist(
        self,
        db: AsyncSession,
        data: ChecklistCreate,
    ) -> Checklist:
        """체크리스트와 항목을 함께 생성합니다.

        Create a checklist and its items in the caller's transaction.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 생성 요청 데이터 (Creation payload)

        Returns:
            Checklist: 항목이 로드된 체크리스트 (Checklist with items loaded)
        """
        checklist: Checklist = await checklist_repository.create(
            db, {"name": data.name, "category": data.category, "is_active": True}
        )
        await checklist_repository.add_items(
            db,
            checklist,
            [item.model_dump(exclude_none=True) for item in data.items],
        )
        logger.info("Checklist created: %s (%d items)", checklist.id, len(data.items))
        return await self.get_checklist(db, checklist.id)

    async def update_checklist(
        self,
        db: AsyncSession,
        checklist_id: UUID,
        data: ChecklistUpdate,
    ) -> Checklist:
        """체크리스트 이름/분류/활성 상태를 수정합니다.

        Rename, recategorize or (de)activate a checklist.
        """
        updated: Checklist | None = await checklist_repository.update(
            db, checklist_id, data.model_dump(exclude_unset=True, exclude_none=True)
        )
        if updated is None:
            raise NotFoundError("Checklist not found")
        return await self.get_checklist(db, checklist_id)

    def build_response(self, checklist: Checklist, item_count: int | None = None) -> dict:
        return {
            "id": str(checklist.id),
            "name": checklist.name,
            "category": checklist.category,
            "is_active": checklist.is_active,
            "item_count": item_count if item_count is not None else len(checklist.items),
        }

    def build_detail(self, checklist: Checklist) -> dict:
        """체크리스트 상세 응답 딕셔너리 — Detail response with ordered items."""
        result: dict = self.build_response(checklist)
        result["items"] = [
            {
                "id": str(item.id),
                "text": item.text,
                "critical": item.critical,
                "sort_order": item.sort_order,
            }
            for item in checklist.items
        ]
        return result


# 싱글턴 인스턴스 — Singleton instance
catalog_service: CatalogService = CatalogService()
