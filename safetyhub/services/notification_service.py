"""알림 서비스 — 치명 실패 알림 발송 및 알림 조회.

Notification Service — Fan-out of "inspection failed" notices to the
role-based distribution list, plus the caller's notification listing.

Delivery is one attempt per recipient with no retry. Each recipient gets
an in-app notification (written inside its own SAVEPOINT) and, when SMTP
is configured and the recipient has an address, an email. Per-recipient
failures are logged and reported as ``False``; ``notify`` never raises.
"""

import logging
from html import escape
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from safetyhub.config import settings
from safetyhub.models.checklist import Checklist
from safetyhub.models.inspection import Inspection
from safetyhub.models.notification import Notification
from safetyhub.models.user import User
from safetyhub.repositories.notification_repository import notification_repository
from safetyhub.repositories.user_repository import user_repository
from safetyhub.utils.email import email_enabled, send_email

logger = logging.getLogger(__name__)

# 알림 템플릿 — Notification templates (subject, in-app message)
TEMPLATES: dict[str, dict[str, str]] = {
    "inspection_failed": {
        "subject": "Inspection Failed: {checklist_name}",
        "message": (
            "Inspection {reference} of \"{checklist_name}\" recorded "
            "{failure_count} critical failure(s). Corrective actions have been created."
        ),
    },
}


def render_template(template_name: str, template_data: dict[str, Any]) -> tuple[str, str]:
    """템플릿을 (제목, 메시지)로 렌더링 — Render a template to (subject, message)."""
    template = TEMPLATES[template_name]
    return (
        template["subject"].format(**template_data),
        template["message"].format(**template_data),
    )


def _email_html(message: str, link: str | None) -> str:
    body = f"<p>{escape(message)}</p>"
    if link:
        body += f'<p><a href="{escape(link)}">View inspection</a></p>'
    return f"<html><body>{body}</body></html>"


class NotificationService:
    """알림 서비스.

    Notification service providing the transport (``notify``), the
    inspection-failed fan-out and per-user listing.
    """

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Notification], int]:
        """사용자의 알림 목록을 페이지네이션하여 조회합니다.

        List paginated notifications for a user.
        """
        return await notification_repository.get_user_notifications(db, user_id, page, per_page)

    async def _deliver(
        self,
        db: AsyncSession,
        recipient: User,
        template_name: str,
        subject: str,
        message: str,
        template_data: dict[str, Any],
    ) -> bool:
        link: str | None = template_data.get("link")
        async with db.begin_nested():
            await notification_repository.create_notification(
                db,
                user_id=recipient.id,
                notification_type=template_name,
                message=message,
                link=link,
                reference_type=template_data.get("reference_type"),
                reference_id=template_data.get("reference_id"),
            )
        if email_enabled() and recipient.email:
            await send_email(
                to=recipient.email,
                subject=subject,
                html=_email_html(message, link),
                text=f"{message}\n\n{link}" if link else message,
            )
        return True

    async def notify(
        self,
        db: AsyncSession,
        recipients: Sequence[User],
        template_name: str,
        template_data: dict[str, Any],
    ) -> dict[UUID, bool]:
        """수신자별로 알림을 한 번씩 발송합니다.

        Send one notification per recipient. Never raises for the caller.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            recipients: 수신자 목록 (Recipients)
            template_name: 템플릿 이름 (Template name, e.g. "inspection_failed")
            template_data: 템플릿 데이터 (Template values; "link", "reference_type",
                           "reference_id" are also attached to the in-app row)

        Returns:
            dict[UUID, bool]: 수신자별 성공 여부 (Per-recipient success)
        """
        try:
            subject, message = render_template(template_name, template_data)
        except (KeyError, IndexError, ValueError):
            logger.exception("Notification template %r could not be rendered", template_name)
            return {recipient.id: False for recipient in recipients}

        results: dict[UUID, bool] = {}
        for recipient in recipients:
            try:
                results[recipient.id] = await self._deliver(
                    db, recipient, template_name, subject, message, template_data
                )
            except Exception:  # noqa: BLE001
                # NotificationFailure — 기록만 하고 계속 진행 (Logged, never propagated)
                logger.exception("Notification delivery failed (template=%s, recipient=%s)", template_name, recipient.id)
                results[recipient.id] = False
        return results

    async def fan_out_inspection_failed(
        self,
        db: AsyncSession,
        inspection: Inspection,
        checklist: Checklist,
        failure_count: int,
    ) -> int:
        """치명 실패 점검 알림을 에스컬레이션 역할 보유자에게 발송합니다.

        Notify every active user holding an escalation role that an
        inspection recorded critical failures.

        Returns:
            int: 성공적으로 알림을 받은 수신자 수 (Recipients notified successfully)
        """
        try:
            recipients: Sequence[User] = await user_repository.list_active_by_role_names(
                db, settings.ESCALATION_ROLES
            )
        except SQLAlchemyError:
            logger.exception("Recipient resolution failed for inspection %s", inspection.id)
            return 0

        template_data: dict[str, Any] = {
            "checklist_name": checklist.name,
            "failure_count": failure_count,
            "reference": inspection.reference,
            "link": f"{settings.APP_BASE_URL.rstrip('/')}/inspections/{inspection.id}",
            "reference_type": "inspection",
            "reference_id": inspection.id,
        }
        results: dict[UUID, bool] = await self.notify(db, recipients, "inspection_failed", template_data)
        delivered: int = sum(1 for ok in results.values() if ok)
        if delivered < len(results):
            logger.warning(
                "Inspection %s: %d of %d failure notifications delivered",
                inspection.id, delivered, len(results),
            )
        else:
            logger.info("Inspection %s: notified %d recipients", inspection.id, delivered)
        return delivered


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
