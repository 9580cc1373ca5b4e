"""시정 조치 SQLAlchemy ORM 모델 정의.

Corrective action SQLAlchemy ORM model definition.
Corrective actions derived from inspections are created only by the
escalation step, one per failed critical item.

Tables:
    - corrective_actions: 시정 조치 (Follow-up tasks for critical failures)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from safetyhub.database import Base
from safetyhub.models.inspection import JsonList


class CorrectiveAction(Base):
    """시정 조치 모델.

    Corrective action model. ``action_plan`` carries the generated
    description ("Inspection failure: {item text}"); ``inspection_id`` links
    an action back to the inspection that produced it.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        inspection_id: 원인 점검 FK, 수동 생성 시 null (Originating inspection, null for manual actions)
        action_plan: 생성된 설명 (Generated description)
        corrective_action: 조치 내용 — 응답 메모 또는 기본 문구 (Response note or fallback text)
        target_date: 완료 기한 (Due date)
        priority: 우선순위 (low | normal | high)
        status: 상태 (pending | in_progress | completed)
        attachments: 첨부 사진 목록 (Photo references copied from the response)
        created_by: 생성자 FK — 점검자 (Triggering inspector)
    """

    __tablename__ = "corrective_actions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    inspection_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("inspections.id", ondelete="SET NULL"), nullable=True, index=True)
    action_plan: Mapped[str] = mapped_column(Text, nullable=False)
    corrective_action: Mapped[str] = mapped_column(Text, nullable=False)
    responsible_officer: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"), nullable=True)
    target_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="normal")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    attachments: Mapped[list[str]] = mapped_column(JsonList, nullable=False, default=list)
    created_by: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
