"""알림 레포지토리 — 알림 관련 DB 쿼리 담당.

Notification Repository — In-app notification rows written by the
inspection-failed fan-out and read by the notifications endpoint.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.models.notification import Notification
from safetyhub.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Notification repository with per-recipient listing.

    Extends:
        BaseRepository[Notification]
    """

    def __init__(self) -> None:
        super().__init__(Notification)

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        Retrieve paginated notifications for a user, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)
            page: 페이지 번호, 1부터 시작 (Page number, 1-based)
            per_page: 페이지당 항목 수 (Items per page)

        Returns:
            tuple[Sequence[Notification], int]: (알림 목록, 전체 개수)
                                                 (List of notifications, total count)
        """
        query: Select = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        )
        return await self.get_paginated(db, query, page, per_page)

    async def count_for_reference(
        self,
        db: AsyncSession,
        reference_type: str,
        reference_id: UUID,
    ) -> int:
        """참조 엔티티에 연결된 알림 수를 조회합니다.

        Count notifications pointing at a given entity.
        """
        query: Select = (
            select(func.count())
            .select_from(Notification)
            .where(
                Notification.reference_type == reference_type,
                Notification.reference_id == reference_id,
            )
        )
        count: int = (await db.execute(query)).scalar() or 0
        return count

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
        message: str,
        link: str | None = None,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> Notification:
        """새 알림을 생성합니다.

        Create a new notification.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 수신자 UUID (Recipient user UUID)
            notification_type: 알림 유형 (Notification type)
            message: 알림 메시지 (Notification message)
            link: 딥링크, 선택 (Optional deep link)
            reference_type: 참조 유형, 선택 (Optional reference type)
            reference_id: 참조 ID, 선택 (Optional reference UUID)

        Returns:
            Notification: 생성된 알림 (Created notification)
        """
        notification: Notification = Notification(
            user_id=user_id,
            type=notification_type,
            message=message,
            link=link,
            reference_type=reference_type,
            reference_id=reference_id,
        )
        db.add(notification)
        await db.flush()
        await db.refresh(notification)
        return notification


# 싱글턴 인스턴스 — Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
