"""관리자 API 라우터 패키지 — 관리자 엔드포인트 통합.

Admin API Router package — Aggregates admin-facing endpoints.

Included routers:
    - checklists: 체크리스트 카탈로그 관리 (Checklist catalog management)
"""

from fastapi import APIRouter

from safetyhub.api.admin.checklists import router as checklists_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(checklists_router, prefix="/checklists", tags=["Admin Checklists"])
