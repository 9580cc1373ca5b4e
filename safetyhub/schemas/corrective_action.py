"""시정 조치 / 알림 Pydantic 응답 스키마.

Corrective action and notification response schemas.
"""

from datetime import datetime

from pydantic import BaseModel

from safetyhub.schemas.common import PaginatedResponse


class CorrectiveActionResponse(BaseModel):
    """시정 조치 응답 스키마.

    Attributes:
        id: 조치 UUID (Corrective action identifier)
        inspection_id: 원인 점검 UUID (Originating inspection, nullable)
        action_plan: 생성된 설명 (Generated description)
        corrective_action: 조치 내용 (Response note or fallback text)
        target_date: 완료 기한 (Due date)
        priority: 우선순위 (Priority)
        status: 상태 (Status)
        attachments: 첨부 사진 (Photo references)
        created_by: 생성자 UUID (Triggering inspector)
        created_at: 생성 일시 (Creation timestamp)
    """

    id: str
    inspection_id: str | None
    action_plan: str
    corrective_action: str
    responsible_officer: str | None = None
    target_date: datetime
    priority: str
    status: str
    attachments: list[str] = []
    created_by: str
    created_at: datetime


class NotificationResponse(BaseModel):
    """알림 응답 스키마.

    Uses polymorphic reference_type + reference_id for deep-linking
    to the source entity in the client app.
    """

    id: str
    type: str  # 알림 유형 — "inspection_failed"
    message: str
    link: str | None
    reference_type: str | None
    reference_id: str | None
    is_read: bool
    created_at: datetime


class CorrectiveActionPage(PaginatedResponse):
    items: list[CorrectiveActionResponse]


class NotificationPage(PaginatedResponse):
    items: list[NotificationResponse]
