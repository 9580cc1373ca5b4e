"""사용자 및 역할 관련 SQLAlchemy ORM 모델 정의.

User and Role SQLAlchemy ORM model definitions.
Users mirror the identity provider's profiles; the role decides who may
administer the checklist catalog and who receives escalation notices.

Tables:
    - roles: 역할 (Roles with an authority level, 1 = highest)
    - users: 사용자 프로필 (Identity provider user profiles)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from safetyhub.database import Base

# 관리자 권한 레벨 — Manager level and above may administer checklists and view any inspection
MANAGER_LEVEL = 2


class Role(Base):
    """역할 모델 — 권한 수준을 정의.

    Role model — Lower level numbers indicate higher authority:
        1 = admin / owner, 2 = manager, 3 = inspector, 4 = worker

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 역할 이름 (Role name, unique, e.g. "admin", "inspector")
        level: 권한 레벨 (Permission level, 1=highest)
    """

    __tablename__ = "roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 역할 이름 — 에스컬레이션 수신자 판별에 사용 (Used to resolve escalation recipients)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    users = relationship("User", back_populates="role")


class User(Base):
    """사용자 모델 — IdP 사용자 프로필 미러.

    User model — Local mirror of an identity provider profile.

    Attributes:
        id: 고유 식별자 UUID, 토큰의 sub 클레임 (Token "sub" claim)
        role_id: 역할 FK (Assigned role)
        username: 로그인 아이디 (Login name)
        email: 이메일, 알림 발송용 (Email address used for notifications)
        full_name: 실명 (Display name)
        is_active: 활성 상태 (Inactive users cannot authenticate)
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    role_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("roles.id"), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    role = relationship("Role", back_populates="users")

    def has_level(self, max_level: int) -> bool:
        """역할 레벨이 max_level 이하인지 확인 — True when the role level is <= max_level."""
        return self.role is not None and self.role.level <= max_level
