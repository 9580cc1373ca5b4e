"""점검 API 클라이언트 — httpx 기반 비동기 HTTP 클라이언트.

Inspection API Client — Thin async wrapper over the inspector-facing
endpoints, used by the interactive form. Non-2xx responses and transport
errors are raised as ``ApiError``.
"""

import logging
from typing import Any
from uuid import UUID

import httpx

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


class ApiError(Exception):
    """API 호출 실패 — status_code is None for transport errors."""

    def __init__(self, status_code: int | None, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return str(body)


class InspectionApiClient:
    """점검 API 클라이언트.

    Args:
        http: httpx 비동기 클라이언트 (base_url already set; an ASGITransport works in tests)
        token: IdP 액세스 토큰 (Bearer token)
    """

    def __init__(self, http: httpx.AsyncClient, token: str | None = None) -> None:
        self._http = http
        self._token = token

    @classmethod
    def connect(cls, base_url: str, token: str, timeout: float = 30.0) -> "InspectionApiClient":
        """기본 URL로 새 클라이언트 생성 — Build a client with its own connection pool."""
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout), token)

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"} if self._token else {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response: httpx.Response = await self._http.request(
                method, f"{API_PREFIX}{path}", headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiError(None, str(exc) or exc.__class__.__name__) from exc
        if response.is_error:
            raise ApiError(response.status_code, _error_detail(response))
        return response

    async def get_checklist(self, checklist_id: UUID | str) -> dict:
        """활성 체크리스트와 항목 조회."""
        response = await self._request("GET", f"/checklists/{checklist_id}")
        return response.json()

    async def start_inspection(self, checklist_id: UUID | str) -> dict:
        """점검 시작/재개 — Returns {inspection_id, started_at, resumed, message}."""
        response = await self._request("POST", "/inspections/start", json={"checklist_id": str(checklist_id)})
        return response.json()

    async def submit_inspection(self, inspection_id: UUID | str, responses: list[dict]) -> dict:
        response = await self._request(
            "POST", f"/inspections/{inspection_id}/submit", json={"responses": responses}
        )
        return response.json()

    async def get_stats(self, inspection_id: UUID | str) -> dict:
        response = await self._request("GET", f"/inspections/{inspection_id}/stats")
        return response.json()

    async def get_report(self, inspection_id: UUID | str) -> dict:
        response = await self._request("GET", f"/inspections/{inspection_id}/report")
        return response.json()

    async def download_report_pdf(self, inspection_id: UUID | str) -> bytes:
        response = await self._request("GET", f"/inspections/{inspection_id}/pdf")
        return response.content
