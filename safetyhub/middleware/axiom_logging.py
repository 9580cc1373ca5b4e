"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures request/response data and ships one structured event per request
to Axiom. When Axiom is not configured the same event is written to the
``safetyhub.request`` logger instead.

Sensitive fields (password, token, secret) are masked. Inline photo
payloads (``data:`` URLs attached to inspection responses) are replaced by
a size marker so submission logs stay small.
"""

import json
import logging
import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from axiom_py import Client as AxiomClient

from safetyhub.config import settings

logger = logging.getLogger("safetyhub.request")

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_value(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("data:"):
        return f"<inline {len(value)} chars>"
    if isinstance(value, str) and len(value) > 500:
        return value[:500] + "...(truncated)"
    return value


def mask_payload(data: Any, depth: int = 0) -> Any:
    """민감 필드/인라인 사진 마스킹 — Recursively mask sensitive keys and inline photos."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else mask_payload(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        masked = [mask_payload(item, depth + 1) for item in data[:50]]
        if len(data) > 50:
            masked.append(f"...(+{len(data) - 50} more)")
        return masked
    return _mask_value(data)


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom(또는 로컬 로거)에 기록하는 미들웨어.

    Middleware that logs all API requests and responses.
    Captures: method, path, query params, masked request body, status
    code, duration, error detail.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    def _emit(self, event: dict[str, Any]) -> None:
        if self._client is None:
            level = logging.WARNING if event["status_code"] >= 500 else logging.INFO
            logger.log(
                level,
                "%s %s -> %s (%sms)",
                event["method"],
                event["path"],
                event["status_code"],
                event["duration_ms"],
                extra={"request_event": event},
            )
            return
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:  # noqa: BLE001
            # 로깅 실패는 요청 처리에 영향을 주지 않음 — Log shipping never breaks a request
            logger.warning("Axiom ingest failed for %s %s", event["method"], event["path"], exc_info=True)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()

        method = request.method
        path = request.url.path
        query_params = dict(request.query_params) if request.query_params else None

        # Request body 읽기 — Read request body (only for methods with body)
        request_body: Any = None
        if method in ("POST", "PUT", "PATCH"):
            body_bytes = await request.body()
            if body_bytes:
                try:
                    request_body = mask_payload(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    request_body = "(non-json body)"

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

                try:
                    error_data = json.loads(resp_body)
                    detail = error_data.get("detail", error_data) if isinstance(error_data, dict) else error_data
                    error_detail = detail if isinstance(detail, str) else json.dumps(detail)[:500]
                except (json.JSONDecodeError, UnicodeDecodeError):
                    error_detail = resp_body.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if query_params:
                event["query_params"] = mask_payload(query_params)
            if request.path_params:
                event["path_params"] = dict(request.path_params)
            if request_body is not None:
                event["request_body"] = request_body
            if error_detail:
                event["error"] = error_detail
            self._emit(event)

        return response
