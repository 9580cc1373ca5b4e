"""점검 클라이언트 패키지 — 오프라인 초안 저장 및 점검 양식.

Inspection client package — The interactive form contract, the local
draft store it writes to and a thin HTTP client for the inspection API.
"""

from safetyhub.client.api import ApiError, InspectionApiClient
from safetyhub.client.draft_store import DraftStore, FileDraftStore, InMemoryDraftStore
from safetyhub.client.form import IncompleteInspectionError, InspectionForm, SubmissionError

__all__ = [
    "ApiError", "InspectionApiClient",
    "DraftStore", "FileDraftStore", "InMemoryDraftStore",
    "IncompleteInspectionError", "InspectionForm", "SubmissionError",
]
