"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the metadata, which
is required for migrations and relationship resolution.

Modules:
    user: 역할 및 사용자 (Role and User)
    checklist: 체크리스트 카탈로그 (Checklist and ChecklistItem)
    inspection: 점검 및 응답 (Inspection and InspectionResponse)
    corrective_action: 시정 조치 (CorrectiveAction)
    notification: 알림 (User notifications)
"""

from safetyhub.models.user import Role, User
from safetyhub.models.checklist import Checklist, ChecklistItem
from safetyhub.models.inspection import Inspection, InspectionResponse
from safetyhub.models.corrective_action import CorrectiveAction
from safetyhub.models.notification import Notification

__all__ = [
    "Role", "User",
    "Checklist", "ChecklistItem",
    "Inspection", "InspectionResponse",
    "CorrectiveAction",
    "Notification",
]
