"""점검 서비스 — 점검 라이프사이클 오케스트레이션.

Inspection Service — Orchestrates the inspection lifecycle behind the
HTTP API: start/resume, submission, stats, detail and reports.

Submission is an explicit three-phase pipeline rather than one
transaction:
    1. 응답 저장 (Persist responses) — all-or-nothing, committed before
       anything else runs.
    2. 시정 조치 생성 (Derive corrective actions) — best-effort per item,
       partial failure reported as counts.
    3. 알림 발송 (Notify) — only when there are critical failures; delivery
       failures are logged and never fail the call.
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.inspection import Inspection
from safetyhub.models.user import User
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.schemas.inspection import InspectionReport, InspectionStats, InspectionSubmitRequest
from safetyhub.services.escalation_service import EscalationResult, critical_failure_escalator
from safetyhub.services.notification_service import notification_service
from safetyhub.services.report_service import report_service
from safetyhub.services.response_collector import response_collector
from safetyhub.services.session_service import inspection_session_service
from safetyhub.utils.pdf import render_inspection_report

logger = logging.getLogger(__name__)


class InspectionService:
    """점검 서비스.

    Inspection service composing the session manager, response collector,
    escalator, notification fan-out and report compiler.
    """

    async def start_inspection(
        self,
        db: AsyncSession,
        user: User,
        checklist_id: UUID,
    ) -> dict:
        """점검 시작 또는 재개 — Start or resume an inspection for the caller."""
        inspection, resumed = await inspection_session_service.start(db, user.id, checklist_id)
        return {
            "inspection_id": str(inspection.id),
            "started_at": inspection.started_at,
            "resumed": resumed,
            "message": "Resumed existing inspection" if resumed else "Inspection started",
        }

    async def submit_inspection(
        self,
        db: AsyncSession,
        user: User,
        inspection_id: UUID,
        data: InspectionSubmitRequest,
    ) -> dict:
        """점검을 제출하고 시정 조치/알림을 처리합니다.

        Submit an inspection, derive corrective actions and fan out
        notifications.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 제출자 (Submitting inspector)
            inspection_id: 점검 UUID (Inspection UUID)
            data: 항목별 응답 목록 (Per-item responses)

        Returns:
            dict: 제출 결과 (submitted_at, created_actions, qualifying_failures, ...)

        Raises:
            NotFoundError: 점검 없음 (Inspection not found)
            ForbiddenError: 다른 점검자의 점검 (Another inspector's inspection)
            AlreadySubmittedError: 이미 제출됨 (Already submitted)
            InvalidPayloadError: 잘못된 응답 목록 (Inconsistent payload)
        """
        inspection: Inspection = await inspection_session_service.get_owned(db, inspection_id, user)
        checklist = inspection.checklist

        # 1단계 — Phase 1
        submitted_at = await response_collector.submit(db, inspection, data.responses)
        await db.commit()

        # 2단계 — Phase 2
        escalation: EscalationResult = await critical_failure_escalator.escalate(
            db, inspection, submitted_at, data.responses
        )
        if escalation.read_failed:
            await self._rollback_and_reload(db, inspection, checklist)
        elif not await self._commit_side_effects(db, "corrective actions", inspection, checklist):
            escalation.created_actions = 0
            escalation.failed_item_ids = list(escalation.qualifying_item_ids)

        # 3단계 — Phase 3
        notified: int = 0
        if escalation.qualifying_failures > 0:
            notified = await notification_service.fan_out_inspection_failed(
                db, inspection, checklist, escalation.qualifying_failures
            )
            # 롤백된 인앱 알림은 발송으로 세지 않음 — Rolled-back rows are not delivered
            if not await self._commit_side_effects(db, "notifications", inspection, checklist):
                notified = 0

        if escalation.partial_failure:
            message = (
                f"Inspection submitted. {escalation.created_actions} of "
                f"{escalation.qualifying_failures} corrective actions were created."
            )
        elif escalation.created_actions:
            message = f"Inspection submitted. {escalation.created_actions} corrective action(s) created."
        else:
            message = "Inspection submitted."

        return {
            "inspection_id": str(inspection.id),
            "submitted_at": submitted_at,
            "created_actions": escalation.created_actions,
            "qualifying_failures": escalation.qualifying_failures,
            "failed_item_ids": escalation.failed_item_ids,
            "notified_recipients": notified,
            "message": message,
        }

    async def _commit_side_effects(self, db: AsyncSession, what: str, *instances: object) -> bool:
        """부수 효과 커밋 — A failed commit is logged; phase 1 stays committed."""
        try:
            await db.commit()
        except SQLAlchemyError:
            logger.exception("Committing %s failed", what)
            await self._rollback_and_reload(db, *instances)
            return False
        return True

    async def _rollback_and_reload(self, db: AsyncSession, *instances: object) -> None:
        await db.rollback()
        # 롤백 시 만료된 객체 재적재 — Reload instances expired by the rollback
        for instance in instances:
            if instance is not None:
                await db.refresh(instance)

    async def get_stats(
        self,
        db: AsyncSession,
        user: User,
        inspection_id: UUID,
    ) -> InspectionStats:
        inspection: Inspection = await inspection_session_service.get_readable(db, inspection_id, user)
        return await report_service.get_stats(db, inspection)

    async def get_detail(
        self,
        db: AsyncSession,
        user: User,
        inspection_id: UUID,
    ) -> dict:
        inspection: Inspection = await inspection_session_service.get_readable(db, inspection_id, user)
        return await report_service.build_detail(db, inspection)

    async def get_report(
        self,
        db: AsyncSession,
        user: User,
        inspection_id: UUID,
    ) -> InspectionReport:
        """보고서 문서 조회 — Compiled report document for an inspection."""
        inspection: Inspection = await inspection_session_service.get_readable(db, inspection_id, user)
        return await report_service.compile(db, inspection)

    async def render_report_pdf(
        self,
        db: AsyncSession,
        user: User,
        inspection_id: UUID,
    ) -> bytes:
        """보고서 PDF 렌더링 — Render the compiled report to PDF bytes."""
        report: InspectionReport = await self.get_report(db, user, inspection_id)
        return render_inspection_report(report)

    async def list_my_inspections(
        self,
        db: AsyncSession,
        user: User,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[list[dict], int]:
        """내 점검 목록 (통계 포함) — The caller's inspections with stats, newest first."""
        inspections: Sequence[Inspection]
        inspections, total = await inspection_repository.list_for_inspector(db, user.id, page, per_page)
        items: list[dict] = []
        for inspection in inspections:
            stats: InspectionStats = await report_service.get_stats(db, inspection)
            items.append(report_service.build_summary(inspection, stats))
        return items, total


# 싱글턴 인스턴스 — Singleton instance
inspection_service: InspectionService = InspectionService()
