"""치명 실패 에스컬레이션 서비스 — 시정 조치 자동 생성.

Critical-Failure Escalator — Derives one corrective action per failed
critical item from the persisted responses of a submitted inspection.

Each action is created inside its own SAVEPOINT; a failure to create one
action is logged and does not block the others. The result reports how
many actions were created versus how many qualifying failures were found.
This step runs exactly once per submission and is not re-entrant.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.config import settings
from safetyhub.models.inspection import RESULT_FAIL, Inspection
from safetyhub.repositories.corrective_action_repository import corrective_action_repository
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.schemas.inspection import ResponseEntry

logger = logging.getLogger(__name__)

ACTION_PRIORITY = "high"
ACTION_STATUS = "pending"


def is_critical_failure(result: str, critical: bool) -> bool:
    """치명 실패 판정 — A response qualifies iff it failed and its item is critical."""
    return result == RESULT_FAIL and bool(critical)


@dataclass
class EscalationResult:
    qualifying_failures: int = 0
    created_actions: int = 0
    failed_item_ids: list[str] = field(default_factory=list)
    qualifying_item_ids: list[str] = field(default_factory=list)
    read_failed: bool = False

    @property
    def partial_failure(self) -> bool:
        return self.created_actions < self.qualifying_failures


class CriticalFailureEscalator:
    """치명 실패 에스컬레이터.

    Reads responses back from storage rather than receiving them, so that
    escalation, stats and reports all see identical data.
    """

    async def escalate(
        self,
        db: AsyncSession,
        inspection: Inspection,
        submitted_at: datetime,
        submitted: Sequence[ResponseEntry] = (),
    ) -> EscalationResult:
        """치명 실패 항목마다 시정 조치를 생성합니다.

        Create one corrective action per failed critical item. When the
        persisted responses cannot be read back, no action is created and
        every qualifying item of ``submitted`` is reported as failed.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            inspection: 제출된 점검, 체크리스트 항목 적재 상태 (Submitted inspection with checklist items loaded)
            submitted_at: 제출 일시, 기한 계산 기준 (Submission time, due date base)
            submitted: 제출된 응답 목록 (Responses as submitted)

        Returns:
            EscalationResult: 치명 실패 수, 생성 수, 실패 항목 (Counts and failed item ids)
        """
        try:
            rows = await inspection_repository.get_responses_with_items(db, inspection.id)
        except SQLAlchemyError:
            logger.exception("Reading back responses failed for inspection %s", inspection.id)
            return self._unreadable(inspection, submitted)

        qualifying = [(response, item) for response, item in rows if is_critical_failure(response.result, item.critical)]
        result = EscalationResult(
            qualifying_failures=len(qualifying),
            qualifying_item_ids=[str(item.id) for _, item in qualifying],
        )
        if not qualifying:
            return result

        target_date: datetime = submitted_at + timedelta(days=settings.CORRECTIVE_ACTION_DUE_DAYS)
        for response, item in qualifying:
            try:
                async with db.begin_nested():
                    await corrective_action_repository.create(
                        db,
                        {
                            "inspection_id": inspection.id,
                            "action_plan": f"Inspection failure: {item.text}",
                            "corrective_action": response.note or settings.CORRECTIVE_ACTION_FALLBACK,
                            "target_date": target_date,
                            "priority": ACTION_PRIORITY,
                            "status": ACTION_STATUS,
                            "attachments": list(response.photos or []),
                            "created_by": inspection.inspector_id,
                        },
                    )
                result.created_actions += 1
            except SQLAlchemyError:
                logger.exception(
                    "Corrective action creation failed (inspection=%s, item=%s)",
                    inspection.id, item.id,
                )
                result.failed_item_ids.append(str(item.id))

        if result.partial_failure:
            logger.warning(
                "Escalation partially failed for inspection %s: %d of %d actions created",
                inspection.id, result.created_actions, result.qualifying_failures,
            )
        else:
            logger.info(
                "Escalation created %d corrective actions for inspection %s",
                result.created_actions, inspection.id,
            )
        return result

    def _unreadable(self, inspection: Inspection, submitted: Sequence[ResponseEntry]) -> EscalationResult:
        """재조회 실패 시 제출 내용 기준으로 치명 실패 집계 — Counts from the submitted payload."""
        items = {item.id: item for item in inspection.checklist.items}
        qualifying_ids: list[str] = [
            str(entry.item_id)
            for entry in submitted
            if entry.item_id in items and is_critical_failure(entry.result, items[entry.item_id].critical)
        ]
        if qualifying_ids:
            logger.warning(
                "Escalation skipped for inspection %s: 0 of %d actions created",
                inspection.id, len(qualifying_ids),
            )
        return EscalationResult(
            qualifying_failures=len(qualifying_ids),
            failed_item_ids=list(qualifying_ids),
            qualifying_item_ids=qualifying_ids,
            read_failed=True,
        )


# 싱글턴 인스턴스 — Singleton instance
critical_failure_escalator: CriticalFailureEscalator = CriticalFailureEscalator()
