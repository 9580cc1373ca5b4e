"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the inspection
lifecycle error taxonomy. Services raise these directly; FastAPI renders
them as ``{"detail": "..."}`` with the matching status code.

Usage:
    from safetyhub.utils.exceptions import NotFoundError, AlreadySubmittedError
    raise NotFoundError("Checklist not found")
    raise AlreadySubmittedError()
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a checklist is missing or inactive, or an inspection does
    not exist.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class AlreadySubmittedError(HTTPException):
    """409 Conflict 예외 — 이미 제출된 점검을 다시 제출할 때 사용.

    409 Conflict exception.
    Raised when a submission targets an inspection whose ``submitted_at``
    is already set, including the loser of two concurrent submissions.

    Args:
        detail: 오류 메시지 (Error message, default: "Inspection already submitted")
    """

    def __init__(self, detail: str = "Inspection already submitted") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    403 Forbidden exception.
    Raised when the caller does not own the inspection or lacks the
    required role level.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired
    (e.g. missing bearer token, expired token, unknown user).

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidPayloadError(HTTPException):
    """422 Unprocessable Entity 예외 — 스키마 검증을 통과했지만 내용이 잘못된 경우.

    422 exception for payloads that pass pydantic validation but are not
    consistent with the stored data (duplicate item ids, items that do not
    belong to the inspection's checklist).

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid payload")
    """

    def __init__(self, detail: str = "Invalid payload") -> None:
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
