"""점검 관련 SQLAlchemy ORM 모델 정의.

Inspection SQLAlchemy ORM model definitions.
An inspection is one inspector's pass through a checklist, bounded by a
start and an optional submit event. Responses are written once, in bulk,
when the inspection is submitted.

Tables:
    - inspections: 점검 (One row per inspector pass; submitted_at freezes it)
    - inspection_responses: 점검 응답 (One outcome per checklist item)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, String, DateTime, Integer, Text, ForeignKey, Index, UniqueConstraint, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from safetyhub.database import Base

# PostgreSQL에서는 JSONB, 그 외에는 일반 JSON — JSONB on PostgreSQL, JSON elsewhere
JsonList = JSON().with_variant(JSONB, "postgresql")

# 응답 결과 태그 — Response result tags
RESULT_PASS = "pass"
RESULT_FAIL = "fail"
RESULT_NA = "na"


class Inspection(Base):
    """점검 모델.

    Inspection model. While ``submitted_at`` is null the inspection is
    "open"; at most one open inspection may exist per (inspector, checklist).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        checklist_id: 체크리스트 FK (Checklist being inspected)
        inspector_id: 점검자 FK (Inspector who owns this inspection)
        started_at: 시작 일시 (Start timestamp)
        submitted_at: 제출 일시, 미제출 시 null (Submission timestamp, null while open)

    Constraints:
        uq_inspections_open_per_inspector: 부분 고유 인덱스
            (inspector_id, checklist_id) WHERE submitted_at IS NULL
    """

    __tablename__ = "inspections"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    checklist_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("checklists.id"), nullable=False)
    inspector_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index(
            "uq_inspections_open_per_inspector",
            "inspector_id",
            "checklist_id",
            unique=True,
            postgresql_where=text("submitted_at IS NULL"),
            sqlite_where=text("submitted_at IS NULL"),
        ),
    )

    checklist = relationship("Checklist", lazy="noload")
    # 관계 — Responses in submitted order
    responses = relationship("InspectionResponse", back_populates="inspection", order_by="InspectionResponse.position")

    @property
    def reference(self) -> str:
        """사람이 읽을 수 있는 점검 참조 번호 — Human-readable reference."""
        return f"INS-{self.id}"


class InspectionResponse(Base):
    """점검 응답 모델.

    Inspection response model — the recorded outcome of one checklist item.
    Immutable once written.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        inspection_id: 소속 점검 FK (Parent inspection)
        item_id: 체크리스트 항목 FK (Checklist item answered)
        position: 제출 순서 (Order in the submitted payload)
        result: 결과 태그 (pass | fail | na)
        note: 메모 (Free-text note)
        photos: 사진 참조 목록 (Ordered photo references)

    Constraints:
        uq_inspection_response_item: (inspection_id, item_id) — one response per item
    """

    __tablename__ = "inspection_responses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inspection_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("inspections.id", ondelete="CASCADE"), nullable=False)
    item_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("checklist_items.id"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    result: Mapped[str] = mapped_column(String(10), nullable=False, default=RESULT_NA)
    note: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photos: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("inspection_id", "item_id", name="uq_inspection_response_item"),
    )

    inspection = relationship("Inspection", back_populates="responses")
