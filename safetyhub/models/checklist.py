"""체크리스트 카탈로그 SQLAlchemy ORM 모델 정의.

Checklist catalog SQLAlchemy ORM model definitions.
A checklist is a named, categorized, ordered list of inspection items,
each flagged critical or not. The inspection subsystem only reads these.

Tables:
    - checklists: 체크리스트 (Named, categorized checklists)
    - checklist_items: 체크리스트 항목 (Ordered items with a critical flag)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, Text, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from safetyhub.database import Base


class Checklist(Base):
    """체크리스트 모델.

    Checklist model. Only active checklists can be started.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 체크리스트 이름 (Checklist name)
        category: 분류 (Category, e.g. "fire", "electrical")
        is_active: 활성 여부 (Whether inspections may be started)

    Relationships:
        items: 항목 목록 (Items ordered by sort_order)
    """

    __tablename__ = "checklists"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Items sorted by sort_order for consistent display ordering
    items = relationship("ChecklistItem", back_populates="checklist", cascade="all, delete-orphan", order_by="ChecklistItem.sort_order")


class ChecklistItem(Base):
    """체크리스트 항목 모델.

    Checklist item model. A failed critical item requires a corrective action.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        checklist_id: 소속 체크리스트 FK (Parent checklist)
        text: 항목 내용 (Item text shown to the inspector)
        critical: 치명 항목 여부 (Whether failure requires immediate action)
        sort_order: 정렬 순서 (Display order, lower = first)
    """

    __tablename__ = "checklist_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    checklist_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("checklists.id", ondelete="CASCADE"), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    critical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    checklist = relationship("Checklist", back_populates="items")
