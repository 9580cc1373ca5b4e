"""점검 세션 서비스 — 점검 시작/재개 및 접근 검사.

Inspection Session Service — Creates or resumes exactly one open
inspection per (inspector, checklist) pair and owns the ownership checks
used by every inspection endpoint.

The open-inspection uniqueness is enforced by the partial unique index
``uq_inspections_open_per_inspector``. A concurrent start that loses the
insert race re-reads the winner's row instead of failing.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.inspection import Inspection
from safetyhub.models.user import MANAGER_LEVEL, User
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.services.catalog_service import catalog_service
from safetyhub.utils.exceptions import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


class InspectionSessionService:
    """점검 세션 서비스.

    Inspection session service handling start/resume and access checks.
    """

    async def start(
        self,
        db: AsyncSession,
        inspector_id: UUID,
        checklist_id: UUID,
    ) -> tuple[Inspection, bool]:
        """점검을 시작하거나 기존 미제출 점검을 재개합니다.

        Start an inspection, or resume the open one for this
        (inspector, checklist) pair. Calling start twice never creates two
        open inspections.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            inspector_id: 점검자 UUID (Inspector UUID)
            checklist_id: 체크리스트 UUID (Checklist UUID)

        Returns:
            tuple[Inspection, bool]: (점검, 재개 여부) (Inspection, resumed flag)

        Raises:
            NotFoundError: 체크리스트가 없거나 비활성 (Missing or inactive checklist)
        """
        await catalog_service.get_active_checklist(db, checklist_id)

        existing: Inspection | None = await inspection_repository.get_open_for_inspector(
            db, inspector_id, checklist_id
        )
        if existing is not None:
            logger.info("Inspection resumed: %s (inspector=%s)", existing.id, inspector_id)
            return existing, True

        inspection = Inspection(
            checklist_id=checklist_id,
            inspector_id=inspector_id,
            started_at=datetime.now(timezone.utc),
        )
        try:
            # SAVEPOINT — 고유 인덱스 위반 시 이 삽입만 롤백 (Only this insert rolls back on conflict)
            async with db.begin_nested():
                db.add(inspection)
                await db.flush()
        except IntegrityError:
            winner: Inspection | None = await inspection_repository.get_open_for_inspector(
                db, inspector_id, checklist_id
            )
            if winner is None:
                raise
            logger.info(
                "Start race lost, re-read open inspection %s (inspector=%s, checklist=%s)",
                winner.id, inspector_id, checklist_id,
            )
            return winner, True

        logger.info("Inspection created: %s (inspector=%s, checklist=%s)", inspection.id, inspector_id, checklist_id)
        return inspection, False

    async def get_inspection(
        self,
        db: AsyncSession,
        inspection_id: UUID,
    ) -> Inspection:
        """체크리스트(항목 포함)와 함께 점검을 조회합니다.

        Raises:
            NotFoundError: 점검이 없음 (Inspection not found)
        """
        inspection: Inspection | None = await inspection_repository.get_with_checklist(db, inspection_id)
        if inspection is None:
            raise NotFoundError("Inspection not found")
        return inspection

    async def get_owned(
        self,
        db: AsyncSession,
        inspection_id: UUID,
        user: User,
    ) -> Inspection:
        """호출자 본인의 점검만 반환 — Submission is restricted to the owning inspector."""
        inspection: Inspection = await self.get_inspection(db, inspection_id)
        if inspection.inspector_id != user.id:
            raise ForbiddenError("Inspection belongs to another inspector")
        return inspection

    async def get_readable(
        self,
        db: AsyncSession,
        inspection_id: UUID,
        user: User,
    ) -> Inspection:
        """점검자 본인 또는 관리자 레벨만 조회 가능.

        Stats, detail and reports are readable by the owning inspector or
        any manager-level role.
        """
        inspection: Inspection = await self.get_inspection(db, inspection_id)
        if inspection.inspector_id != user.id and not user.has_level(MANAGER_LEVEL):
            raise ForbiddenError("Not allowed to view this inspection")
        return inspection


# 싱글턴 인스턴스 — Singleton instance
inspection_session_service: InspectionSessionService = InspectionSessionService()
