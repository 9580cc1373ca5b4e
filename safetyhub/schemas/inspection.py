"""점검 라이프사이클 Pydantic 스키마.

Inspection lifecycle request/response schemas: start, submit, stats and
the structured report document consumed by the PDF renderer.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from safetyhub.schemas.common import PaginatedResponse

ResultTag = Literal["pass", "fail", "na"]


# === 시작 (Start) ===

class InspectionStartRequest(BaseModel):
    checklist_id: UUID  # 점검할 체크리스트 (Checklist to inspect)


class InspectionStartResponse(BaseModel):
    """점검 시작 응답 스키마.

    Attributes:
        inspection_id: 점검 UUID (Inspection identifier)
        started_at: 시작 일시 (Start timestamp)
        resumed: 기존 미제출 점검 재개 여부 (True when an open inspection was returned)
        message: 안내 메시지 (Human-readable message)
    """

    inspection_id: str
    started_at: datetime
    resumed: bool = False
    message: str = ""


# === 제출 (Submit) ===

class ResponseEntry(BaseModel):
    """항목별 응답 — One item's outcome in a submission.

    ``result`` defaults to ``na`` for items the form never touched.
    """

    item_id: UUID
    result: ResultTag = "na"
    note: str | None = Field(default=None, max_length=5000)
    photos: list[str] = Field(default_factory=list, max_length=20)


class InspectionSubmitRequest(BaseModel):
    responses: list[ResponseEntry] = Field(default_factory=list)


class InspectionSubmitResponse(BaseModel):
    """점검 제출 응답 스키마.

    ``created_actions < qualifying_failures`` signals that one or more
    corrective actions could not be created; ``failed_item_ids`` lists
    the affected checklist items.

    Attributes:
        inspection_id: 점검 UUID (Inspection identifier)
        submitted_at: 제출 일시 (Submission timestamp)
        created_actions: 생성된 시정 조치 수 (Corrective actions actually created)
        qualifying_failures: 치명 실패 수 (Failed critical items found)
        failed_item_ids: 조치 생성 실패 항목 (Items whose action creation failed)
        notified_recipients: 알림 성공 수신자 수 (Recipients notified successfully)
        message: 안내 메시지 (Human-readable summary)
    """

    inspection_id: str
    submitted_at: datetime
    created_actions: int
    qualifying_failures: int
    failed_item_ids: list[str] = []
    notified_recipients: int = 0
    message: str = ""


# === 통계/보고서 (Stats / Report) ===

class InspectionStats(BaseModel):
    """점검 요약 통계 — Summary counts over persisted responses."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    na: int = 0
    critical_fails: int = 0


class ResponseDetail(BaseModel):
    """항목 텍스트/치명 여부가 결합된 응답 — Response joined with its item."""

    item_id: str
    item_text: str
    critical: bool
    result: ResultTag
    note: str = ""
    photos: list[str] = []


class InspectionSummary(BaseModel):
    id: str
    reference: str  # "INS-{id}"
    checklist_id: str
    checklist_name: str
    category: str
    inspector_id: str
    started_at: datetime
    submitted_at: datetime | None = None
    stats: InspectionStats


class InspectionDetail(InspectionSummary):
    responses: list[ResponseDetail] = []


class ReportHeader(BaseModel):
    system_name: str
    title: str = "Inspection Report"
    generated_at: datetime


class ReportMetadata(BaseModel):
    reference: str
    checklist_name: str
    category: str
    inspector_id: str
    inspector_name: str | None = None
    started_at: datetime
    submitted_at: datetime | None = None


class ReportRow(BaseModel):
    index: int  # 1부터 시작하는 행 번호 (1-based row number)
    item_text: str
    result: ResultTag
    critical: bool
    note: str = ""


class FailedItemDetail(BaseModel):
    item_text: str
    critical: bool
    note: str = ""
    photo_count: int = 0


class InspectionReport(BaseModel):
    """고정 구성 점검 보고서 문서.

    Fixed-section report document: header, metadata, summary counts,
    per-item results table in submitted order, failed-item details and
    the auto-generated-actions notice (present only when there are
    critical failures).
    """

    header: ReportHeader
    metadata: ReportMetadata
    summary: InspectionStats
    results: list[ReportRow] = []
    failed_items: list[FailedItemDetail] = []
    actions_notice: str | None = None


class InspectionPage(PaginatedResponse):
    items: list[InspectionSummary]
