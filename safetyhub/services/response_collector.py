"""응답 수집 서비스 — 점검 응답 검증 및 저장.

Response Collector — Validates and persists the set of per-item responses
for an inspection. This is phase 1 of submission and the only phase with
all-or-nothing semantics: the inspection is frozen and every response row
is written, or nothing is.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from safetyhub.models.inspection import Inspection
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.schemas.inspection import ResponseEntry
from safetyhub.utils.exceptions import AlreadySubmittedError, InvalidPayloadError

logger = logging.getLogger(__name__)


class ResponseCollector:
    """응답 수집기.

    Transport-independent: used by the submission API and, through it, by
    the interactive form. Completeness is not enforced here; any subset of
    the checklist's items is accepted.
    """

    def validate(self, inspection: Inspection, entries: list[ResponseEntry]) -> None:
        """응답 목록이 점검의 체크리스트와 일치하는지 검증합니다.

        Reject duplicate item ids and items from other checklists.

        Raises:
            InvalidPayloadError: 잘못된 응답 목록 (Inconsistent payload)
        """
        seen: set = set()
        duplicates: list[str] = []
        for entry in entries:
            if entry.item_id in seen:
                duplicates.append(str(entry.item_id))
            seen.add(entry.item_id)
        if duplicates:
            raise InvalidPayloadError(f"Duplicate responses for items: {', '.join(duplicates)}")

        known = {item.id for item in inspection.checklist.items} if inspection.checklist else set()
        unknown = [str(entry.item_id) for entry in entries if entry.item_id not in known]
        if unknown:
            raise InvalidPayloadError(f"Items do not belong to this checklist: {', '.join(unknown)}")

    async def submit(
        self,
        db: AsyncSession,
        inspection: Inspection,
        entries: list[ResponseEntry],
    ) -> datetime:
        """점검을 제출 상태로 고정하고 응답을 일괄 저장합니다.

        Freeze the inspection and bulk-insert its responses. The caller
        commits; on failure the transaction has already been rolled back.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            inspection: 체크리스트가 로드된 점검 (Inspection with checklist loaded)
            entries: 항목별 응답 목록 (Per-item responses, in submitted order)

        Returns:
            datetime: 제출 일시 (Submission timestamp)

        Raises:
            AlreadySubmittedError: 이미 제출됨 (Inspection already submitted)
            InvalidPayloadError: 잘못된 응답 목록 (Inconsistent payload)
        """
        if inspection.submitted_at is not None:
            raise AlreadySubmittedError()
        self.validate(inspection, entries)

        submitted_at: datetime = datetime.now(timezone.utc)
        # compare-and-set — 동시 제출 중 하나만 성공 (Only one concurrent submission wins)
        if not await inspection_repository.mark_submitted(db, inspection.id, submitted_at):
            await db.rollback()
            raise AlreadySubmittedError()

        rows: list[dict] = [
            {
                "inspection_id": inspection.id,
                "item_id": entry.item_id,
                "position": position,
                "result": entry.result,
                "note": entry.note or "",
                "photos": list(entry.photos),
            }
            for position, entry in enumerate(entries)
        ]
        try:
            await inspection_repository.create_responses(db, rows)
        except IntegrityError as exc:
            await db.rollback()
            raise AlreadySubmittedError() from exc

        set_committed_value(inspection, "submitted_at", submitted_at)
        logger.info("Inspection submitted: %s (%d responses)", inspection.id, len(rows))
        return submitted_at


# 싱글턴 인스턴스 — Singleton instance
response_collector: ResponseCollector = ResponseCollector()
