"""앱 API 라우터 패키지 — 점검자용 엔드포인트 통합.

App API Router package — Aggregates the inspector-facing endpoints into a
single router for inclusion in the FastAPI application.

Included routers:
    - checklists: 활성 체크리스트 카탈로그 (Active checklist catalog)
    - inspections: 점검 라이프사이클 (Inspection lifecycle)
    - corrective_actions: 시정 조치 목록 (Corrective actions)
    - notifications: 내 알림 (My notifications)
"""

from fastapi import APIRouter

from safetyhub.api.app.checklists import router as checklists_router
from safetyhub.api.app.inspections import router as inspections_router
from safetyhub.api.app.corrective_actions import router as corrective_actions_router
from safetyhub.api.app.notifications import router as notifications_router

app_router: APIRouter = APIRouter()

app_router.include_router(checklists_router, prefix="/checklists", tags=["Checklists"])
app_router.include_router(inspections_router, prefix="/inspections", tags=["Inspections"])
app_router.include_router(corrective_actions_router, prefix="/corrective-actions", tags=["Corrective Actions"])
app_router.include_router(notifications_router, prefix="/notifications", tags=["Notifications"])
