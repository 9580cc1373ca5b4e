"""점검 초안 저장소 — 체크리스트별 진행 중 응답의 로컬 저장.

Draft Store — Client-local key/value cache holding in-progress responses
keyed by checklist id (an inspection may not exist yet when drafting
starts). Drafts survive restarts with ``FileDraftStore`` and are never
shared across devices.

Draft shape::

    {"<item_id>": {"result": "pass", "note": "...", "photos": ["data:..."]}}
"""

import asyncio
import copy
import json
import os
from pathlib import Path
from typing import Any, Protocol

Draft = dict[str, dict[str, Any]]


class DraftStore(Protocol):
    """초안 저장소 인터페이스 — get/set/delete by checklist id."""

    async def get(self, checklist_id: str) -> Draft | None: ...

    async def set(self, checklist_id: str, draft: Draft) -> None: ...

    async def delete(self, checklist_id: str) -> None: ...


class InMemoryDraftStore:
    """메모리 초안 저장소 — Process-local store, used by tests."""

    def __init__(self) -> None:
        self._drafts: dict[str, Draft] = {}

    async def get(self, checklist_id: str) -> Draft | None:
        draft = self._drafts.get(str(checklist_id))
        return copy.deepcopy(draft) if draft is not None else None

    async def set(self, checklist_id: str, draft: Draft) -> None:
        self._drafts[str(checklist_id)] = copy.deepcopy(draft)

    async def delete(self, checklist_id: str) -> None:
        self._drafts.pop(str(checklist_id), None)

    def __contains__(self, checklist_id: object) -> bool:
        return str(checklist_id) in self._drafts


class FileDraftStore:
    """파일 초안 저장소 — 체크리스트당 JSON 파일 하나.

    One JSON file per checklist under ``directory``. Writes go to a
    temporary file first and are moved into place, so a crash mid-write
    leaves the previous draft intact. File I/O runs in a worker thread.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, checklist_id: str) -> Path:
        return self.directory / f"inspection_draft_{checklist_id}.json"

    def _read(self, path: Path) -> Draft | None:
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return None

    def _write(self, path: Path, draft: Draft) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(draft, fh, ensure_ascii=False)
        os.replace(tmp, path)

    async def get(self, checklist_id: str) -> Draft | None:
        return await asyncio.to_thread(self._read, self._path(checklist_id))

    async def set(self, checklist_id: str, draft: Draft) -> None:
        await asyncio.to_thread(self._write, self._path(checklist_id), copy.deepcopy(draft))

    async def delete(self, checklist_id: str) -> None:
        await asyncio.to_thread(self._path(checklist_id).unlink, True)
