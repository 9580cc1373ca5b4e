"""보고서 컴파일 서비스 — 점검 통계 및 보고서 문서 생성.

Report Compiler — Aggregates an inspection's persisted responses into
summary statistics and a fixed-section report document.

Stats and the report both count through ``tally`` so the inspector
dashboard and the formal report can never disagree.
"""

from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.config import settings
from safetyhub.models.checklist import ChecklistItem
from safetyhub.models.inspection import RESULT_FAIL, RESULT_NA, RESULT_PASS, Inspection, InspectionResponse
from safetyhub.models.user import User
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.repositories.user_repository import user_repository
from safetyhub.schemas.inspection import (
    FailedItemDetail,
    InspectionReport,
    InspectionStats,
    ReportHeader,
    ReportMetadata,
    ReportRow,
)
from safetyhub.services.escalation_service import is_critical_failure

ResponseRow = tuple[InspectionResponse, ChecklistItem]


def tally(rows: Iterable[ResponseRow]) -> InspectionStats:
    """응답 목록의 결과별 개수와 치명 실패 수를 계산합니다.

    Count responses per result tag plus critical failures.
    """
    stats = InspectionStats()
    for response, item in rows:
        stats.total += 1
        if response.result == RESULT_PASS:
            stats.passed += 1
        elif response.result == RESULT_FAIL:
            stats.failed += 1
        elif response.result == RESULT_NA:
            stats.na += 1
        if is_critical_failure(response.result, item.critical):
            stats.critical_fails += 1
    return stats


class ReportService:
    """보고서 서비스.

    Works on submitted and open inspections alike; an open inspection
    has no persisted responses and reports zero counts.
    """

    async def load_rows(self, db: AsyncSession, inspection: Inspection) -> list[ResponseRow]:
        return await inspection_repository.get_responses_with_items(db, inspection.id)

    async def get_stats(self, db: AsyncSession, inspection: Inspection) -> InspectionStats:
        """점검 통계 조회 — Summary counts over persisted responses."""
        return tally(await self.load_rows(db, inspection))

    def build_summary(self, inspection: Inspection, stats: InspectionStats) -> dict:
        checklist = inspection.checklist
        return {
            "id": str(inspection.id),
            "reference": inspection.reference,
            "checklist_id": str(inspection.checklist_id),
            "checklist_name": checklist.name if checklist else "",
            "category": checklist.category if checklist else "",
            "inspector_id": str(inspection.inspector_id),
            "started_at": inspection.started_at,
            "submitted_at": inspection.submitted_at,
            "stats": stats.model_dump(),
        }

    async def build_detail(self, db: AsyncSession, inspection: Inspection) -> dict:
        """점검 상세 — Inspection detail with responses joined to their items."""
        rows: list[ResponseRow] = await self.load_rows(db, inspection)
        result: dict = self.build_summary(inspection, tally(rows))
        result["responses"] = [
            {
                "item_id": str(item.id),
                "item_text": item.text,
                "critical": item.critical,
                "result": response.result,
                "note": response.note or "",
                "photos": list(response.photos or []),
            }
            for response, item in rows
        ]
        return result

    async def compile(
        self,
        db: AsyncSession,
        inspection: Inspection,
    ) -> InspectionReport:
        """점검 보고서 문서를 컴파일합니다.

        Compile the fixed-section report document for an inspection.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            inspection: 체크리스트가 로드된 점검 (Inspection with checklist loaded)

        Returns:
            InspectionReport: 보고서 문서 (Report document)
        """
        rows: list[ResponseRow] = await self.load_rows(db, inspection)
        summary: InspectionStats = tally(rows)
        inspector: User | None = await user_repository.get_by_id(db, inspection.inspector_id)
        checklist = inspection.checklist

        results: list[ReportRow] = [
            ReportRow(
                index=index,
                item_text=item.text,
                result=response.result,
                critical=item.critical,
                note=response.note or "",
            )
            for index, (response, item) in enumerate(rows, start=1)
        ]
        failed_items: list[FailedItemDetail] = [
            FailedItemDetail(
                item_text=item.text,
                critical=item.critical,
                note=response.note or "",
                photo_count=len(response.photos or []),
            )
            for response, item in rows
            if response.result == RESULT_FAIL
        ]
        notice: str | None = None
        if summary.critical_fails > 0:
            notice = (
                f"{summary.critical_fails} critical failure(s) detected. Corrective actions have been "
                "automatically created and assigned to appropriate personnel for immediate action."
            )

        return InspectionReport(
            header=ReportHeader(
                system_name=settings.REPORT_SYSTEM_NAME,
                generated_at=datetime.now(timezone.utc),
            ),
            metadata=ReportMetadata(
                reference=inspection.reference,
                checklist_name=checklist.name if checklist else "N/A",
                category=checklist.category if checklist else "N/A",
                inspector_id=str(inspection.inspector_id),
                inspector_name=inspector.full_name if inspector else None,
                started_at=inspection.started_at,
                submitted_at=inspection.submitted_at,
            ),
            summary=summary,
            results=results,
            failed_items=failed_items,
            actions_notice=notice,
        )


# 싱글턴 인스턴스 — Singleton instance
report_service: ReportService = ReportService()
