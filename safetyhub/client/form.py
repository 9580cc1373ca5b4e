"""점검 양식 — 응답 편집, 초안 자동 저장 및 제출.

Inspection Form — The interactive contract an inspector works through:
record a result, note and photos per item, with every edit persisted to
the draft store in the background.

Rules:
    - 초안은 체크리스트 ID 기준 (Drafts are keyed by checklist id)
    - 초안 저장 실패는 기록만 (Draft write failures are logged, never shown)
    - 모든 항목에 결과를 직접 선택해야 제출 가능 (Submission requires an
      explicitly selected result for every item; an explicit "na" counts)
    - 제출 성공 시 초안 삭제, 실패 시 유지 (Draft is deleted only on success)
"""

import asyncio
import logging
from typing import Any

from safetyhub.client.api import ApiError, InspectionApiClient
from safetyhub.client.draft_store import Draft, DraftStore

logger = logging.getLogger(__name__)

RESULTS: tuple[str, ...] = ("pass", "fail", "na")


class IncompleteInspectionError(Exception):
    """미응답 항목 존재 — Raised when an item has no selected result."""

    def __init__(self, missing_item_ids: list[str]) -> None:
        super().__init__(f"{len(missing_item_ids)} item(s) have no result")
        self.missing_item_ids = missing_item_ids


class SubmissionError(Exception):
    """제출 실패 — The server rejected the submission or was unreachable."""

    def __init__(self, status_code: int | None, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class InspectionForm:
    """점검 양식.

    Args:
        checklist: 체크리스트 상세 (Checklist detail with "id" and ordered "items")
        api: 점검 API 클라이언트 (Inspection API client)
        drafts: 초안 저장소 (Draft store)
    """

    def __init__(self, checklist: dict, api: InspectionApiClient, drafts: DraftStore) -> None:
        self.checklist = checklist
        self.checklist_id: str = str(checklist["id"])
        self.item_ids: list[str] = [str(item["id"]) for item in checklist.get("items", [])]
        self.responses: Draft = {}
        self.submitting: bool = False
        self.error: str | None = None
        self._api = api
        self._drafts = drafts
        self._pending: set[asyncio.Task] = set()
        self._save_lock = asyncio.Lock()
        self._version: int = 0
        self._saved_version: int = 0

    @classmethod
    async def open(cls, api: InspectionApiClient, drafts: DraftStore, checklist_id: str) -> "InspectionForm":
        """체크리스트를 불러오고 저장된 초안을 복원합니다."""
        form = cls(await api.get_checklist(checklist_id), api, drafts)
        await form.load_draft()
        return form

    async def load_draft(self) -> bool:
        """초안 복원 — Restore saved responses; unreadable drafts are ignored."""
        try:
            draft: Draft | None = await self._drafts.get(self.checklist_id)
        except (OSError, ValueError):
            logger.exception("Loading draft for checklist %s failed", self.checklist_id)
            return False
        if not draft:
            return False
        known = set(self.item_ids)
        self.responses = {item_id: dict(entry) for item_id, entry in draft.items() if item_id in known}
        return True

    # === 편집 (Editing) ===

    def _entry(self, item_id: str) -> dict[str, Any]:
        item_id = str(item_id)
        if item_id not in self.item_ids:
            raise KeyError(f"Unknown checklist item: {item_id}")
        return self.responses.setdefault(item_id, {})

    def set_result(self, item_id: str, result: str) -> None:
        if result not in RESULTS:
            raise ValueError(f"Invalid result: {result!r}")
        self._entry(item_id)["result"] = result
        self._schedule_save()

    def set_note(self, item_id: str, note: str) -> None:
        self._entry(item_id)["note"] = note
        self._schedule_save()

    def add_photo(self, item_id: str, photo: str) -> None:
        """사진 추가 — ``photo`` is a data URL or a storage reference."""
        self._entry(item_id).setdefault("photos", []).append(photo)
        self._schedule_save()

    def remove_photo(self, item_id: str, index: int) -> None:
        photos: list[str] = self._entry(item_id).get("photos", [])
        del photos[index]
        self._schedule_save()

    # === 초안 저장 (Draft persistence) ===

    def _schedule_save(self) -> None:
        self._version += 1
        snapshot: Draft = {item_id: dict(entry, photos=list(entry.get("photos", []))) for item_id, entry in self.responses.items()}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, draft for checklist %s not saved", self.checklist_id)
            return
        task = loop.create_task(self._save(self._version, snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _save(self, version: int, snapshot: Draft) -> None:
        async with self._save_lock:
            # 더 최신 초안이 이미 저장됨 — A newer snapshot already landed
            if version <= self._saved_version:
                return
            try:
                await self._drafts.set(self.checklist_id, snapshot)
            except Exception:  # noqa: BLE001
                logger.exception("Saving draft for checklist %s failed", self.checklist_id)
                return
            self._saved_version = version

    async def flush(self) -> None:
        """대기 중인 초안 저장 완료 대기 — Wait for in-flight draft writes."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    # === 제출 (Submission) ===

    @property
    def missing_item_ids(self) -> list[str]:
        return [item_id for item_id in self.item_ids if self.responses.get(item_id, {}).get("result") not in RESULTS]

    @property
    def all_items_responded(self) -> bool:
        return not self.missing_item_ids

    def build_payload(self) -> list[dict]:
        """제출 페이로드 — One entry per item in checklist order, untouched results default to "na"."""
        payload: list[dict] = []
        for item_id in self.item_ids:
            entry = self.responses.get(item_id, {})
            payload.append({
                "item_id": item_id,
                "result": entry.get("result", "na"),
                "note": entry.get("note", ""),
                "photos": list(entry.get("photos", [])),
            })
        return payload

    async def submit(self) -> dict:
        """점검을 시작(재개)하고 응답을 제출합니다.

        Start (or resume) the inspection and submit every response. On
        success the draft is deleted; on failure it is kept and
        ``self.error`` carries the server's message.

        Returns:
            dict: 제출 결과 (Submission result from the server)

        Raises:
            IncompleteInspectionError: 결과 미선택 항목 존재 (Unanswered items)
            SubmissionError: 서버 오류 또는 네트워크 실패 (Server or transport failure)
        """
        missing = self.missing_item_ids
        if missing:
            raise IncompleteInspectionError(missing)

        self.submitting = True
        self.error = None
        try:
            started: dict = await self._api.start_inspection(self.checklist_id)
            result: dict = await self._api.submit_inspection(started["inspection_id"], self.build_payload())
        except ApiError as exc:
            self.error = exc.detail
            logger.warning("Submitting checklist %s failed: %s", self.checklist_id, exc.detail)
            raise SubmissionError(exc.status_code, exc.detail) from exc
        finally:
            self.submitting = False

        await self.flush()
        try:
            await self._drafts.delete(self.checklist_id)
        except OSError:
            logger.exception("Deleting draft for checklist %s failed", self.checklist_id)
        return result
