"""점검 라우터 — 점검 시작/제출/통계/보고서 API.

Inspection Router — Inspector-facing lifecycle endpoints.

Endpoints:
    POST /inspections/start          — 점검 시작 또는 재개 (Start or resume)
    POST /inspections/{id}/submit    — 응답 제출 (Submit responses)
    GET  /inspections                — 내 점검 목록 (My inspections with stats)
    GET  /inspections/{id}           — 점검 상세 (Detail with responses)
    GET  /inspections/{id}/stats     — 요약 통계 (Summary counts)
    GET  /inspections/{id}/report    — 보고서 문서 (Report document, JSON)
    GET  /inspections/{id}/pdf       — 보고서 PDF (Report PDF download)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.api.deps import get_current_user
from safetyhub.database import get_db
from safetyhub.models.user import User
from safetyhub.schemas.inspection import (
    InspectionDetail,
    InspectionPage,
    InspectionReport,
    InspectionStartRequest,
    InspectionStartResponse,
    InspectionStats,
    InspectionSubmitRequest,
    InspectionSubmitResponse,
)
from safetyhub.services.inspection_service import inspection_service

router: APIRouter = APIRouter()


@router.post("/start", response_model=InspectionStartResponse)
async def start_inspection(
    data: InspectionStartRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """점검을 시작하거나 미제출 점검을 재개합니다.

    Start an inspection of a checklist, or resume the caller's open one.
    Repeated calls before submission return the same inspection.

    Args:
        data: 체크리스트 ID (Checklist to inspect)
        db: 비동기 데이터베이스 세션 (Async database session)
        current_user: 인증된 사용자 (Authenticated user)

    Returns:
        dict: 점검 ID, 시작 일시, 재개 여부 (Inspection id, started_at, resumed flag)
    """
    result: dict = await inspection_service.start_inspection(db, current_user, data.checklist_id)
    await db.commit()
    return result


@router.post("/{inspection_id}/submit", response_model=InspectionSubmitResponse)
async def submit_inspection(
    inspection_id: UUID,
    data: InspectionSubmitRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """점검 응답을 제출합니다.

    Submit the inspection's responses. Corrective actions are created for
    failed critical items and the escalation roles are notified.
    ``created_actions < qualifying_failures`` reports a partial failure.
    """
    return await inspection_service.submit_inspection(db, current_user, inspection_id, data)


@router.get("", response_model=InspectionPage)
async def list_my_inspections(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """내 점검 목록 조회 (최신순, 통계 포함)."""
    items, total = await inspection_service.list_my_inspections(db, current_user, page, per_page)
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/{inspection_id}", response_model=InspectionDetail)
async def get_inspection(
    inspection_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """점검 상세 조회."""
    return await inspection_service.get_detail(db, current_user, inspection_id)


@router.get("/{inspection_id}/stats", response_model=InspectionStats)
async def get_inspection_stats(
    inspection_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> InspectionStats:
    """점검 요약 통계 조회.

    Summary counts computed from persisted responses. Always equal to the
    summary section of the report for the same inspection.
    """
    return await inspection_service.get_stats(db, current_user, inspection_id)


@router.get("/{inspection_id}/report", response_model=InspectionReport)
async def get_inspection_report(
    inspection_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> InspectionReport:
    """점검 보고서 문서 조회 (JSON)."""
    return await inspection_service.get_report(db, current_user, inspection_id)


@router.get("/{inspection_id}/pdf")
async def download_inspection_pdf(
    inspection_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> Response:
    """점검 보고서 PDF 다운로드.

    Download the report rendered as an A4 PDF attachment.
    """
    content: bytes = await inspection_service.render_report_pdf(db, current_user, inspection_id)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="inspection-report-{inspection_id}.pdf"'},
    )
