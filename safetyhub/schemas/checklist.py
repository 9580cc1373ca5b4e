"""체크리스트 카탈로그 Pydantic 스키마.

Checklist catalog request/response schemas.
"""

from pydantic import BaseModel, Field


class ChecklistItemCreate(BaseModel):
    """체크리스트 항목 생성 요청 스키마.

    Attributes:
        text: 항목 문구 (Item text shown to the inspector)
        critical: 치명 항목 여부 (Failure requires immediate corrective action)
        sort_order: 정렬 순서, 생략 시 입력 순서 (Display order, defaults to input order)
    """

    text: str = Field(..., min_length=1, max_length=1000)
    critical: bool = False
    sort_order: int | None = None


class ChecklistCreate(BaseModel):
    """체크리스트 생성 요청 스키마 — 항목을 함께 생성.

    Checklist creation request; items are created in the same transaction.
    """

    name: str = Field(..., min_length=1, max_length=255)
    category: str = "general"
    items: list[ChecklistItemCreate] = Field(..., min_length=1)


class ChecklistUpdate(BaseModel):
    """체크리스트 수정 요청 스키마 (부분 업데이트).

    Checklist update request schema (partial update). Deactivating a
    checklist hides it from the catalog and blocks new inspections.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = None
    is_active: bool | None = None


class ChecklistItemResponse(BaseModel):
    id: str  # 항목 UUID 문자열 (Item UUID as string)
    text: str
    critical: bool
    sort_order: int


class ChecklistResponse(BaseModel):
    """체크리스트 목록 응답 스키마.

    Attributes:
        id: 체크리스트 UUID (Checklist identifier)
        name: 이름 (Checklist name)
        category: 분류 (Category, e.g. "fire", "electrical")
        is_active: 활성 여부 (Active flag)
        item_count: 항목 수 (Number of items)
    """

    id: str
    name: str
    category: str
    is_active: bool
    item_count: int = 0


class ChecklistDetailResponse(ChecklistResponse):
    items: list[ChecklistItemResponse] = []  # 정렬된 항목 목록 (Items in display order)
