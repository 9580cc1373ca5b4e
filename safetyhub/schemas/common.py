"""공통 Pydantic 응답 스키마.

Shared list envelope for the paginated inspection, corrective action and
notification endpoints.
"""

from typing import Any
from pydantic import BaseModel


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마 — subclasses narrow ``items`` to a concrete type.

    Attributes:
        items: 현재 페이지 항목 (Items on this page)
        total: 전체 개수 (Total across all pages)
        page: 페이지 번호, 1부터 (1-based page number)
        per_page: 페이지 크기 (Page size)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int
