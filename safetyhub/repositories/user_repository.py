"""사용자 레포지토리 — 사용자/역할 DB 쿼리 담당.

User Repository — Identity lookups used by authentication and by the
role-based recipient resolution of the notification fan-out.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from safetyhub.models.user import Role, User
from safetyhub.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 레포지토리.

    Extends:
        BaseRepository[User]
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_with_role(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> User | None:
        """역할을 함께 로드하여 사용자를 조회합니다.

        Retrieve a user with the role eagerly loaded.
        """
        query: Select = (
            select(User)
            .options(selectinload(User.role))
            .where(User.id == user_id)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_active_by_role_names(
        self,
        db: AsyncSession,
        role_names: list[str],
    ) -> Sequence[User]:
        """지정된 역할을 가진 활성 사용자 목록을 조회합니다.

        List active users holding any of the given role names.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            role_names: 역할 이름 목록 (Role names, e.g. ["admin", "manager"])

        Returns:
            Sequence[User]: 활성 사용자 목록, 이름순 (Active users ordered by name)
        """
        if not role_names:
            return []
        query: Select = (
            select(User)
            .join(Role, User.role_id == Role.id)
            .where(Role.name.in_(role_names), User.is_active.is_(True))
            .order_by(User.full_name)
        )
        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
