"""점검 라이프사이클 API 테스트 — 시작, 제출, 에스컬레이션, 통계, 보고서."""

from datetime import timedelta
from uuid import UUID, uuid4

import aiosmtplib
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from safetyhub.config import settings
from safetyhub.models.corrective_action import CorrectiveAction
from safetyhub.models.inspection import Inspection, InspectionResponse
from safetyhub.models.notification import Notification
from safetyhub.repositories.corrective_action_repository import corrective_action_repository
from safetyhub.repositories.inspection_repository import inspection_repository
from safetyhub.repositories.notification_repository import notification_repository
from safetyhub.services import notification_service as notification_service_module
from safetyhub.services.session_service import inspection_session_service
from tests.conftest import auth_header, make_checklist

API = "/api/v1/inspections"


async def _start(client, token, checklist_id) -> dict:
    resp = await client.post(f"{API}/start", json={"checklist_id": str(checklist_id)}, headers=auth_header(token))
    assert resp.status_code == 200, resp.text
    return resp.json()


def _entries(checklist, results, **extra) -> list[dict]:
    return [
        {"item_id": str(item.id), "result": result, **extra}
        for item, result in zip(checklist.items, results)
    ]


async def _count(db, model, *where) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*where))).scalar()


# === 시작 (Start) ===

class TestStart:
    async def test_start_creates_open_inspection(self, client, db, checklist, inspector_user, inspector_token):
        body = await _start(client, inspector_token, checklist.id)
        assert body["resumed"] is False
        assert body["message"] == "Inspection started"

        inspection = await db.get(Inspection, UUID(body["inspection_id"]))
        assert inspection.inspector_id == inspector_user.id
        assert inspection.submitted_at is None

    async def test_start_twice_returns_same_inspection(self, client, db, checklist, inspector_user, inspector_token):
        first = await _start(client, inspector_token, checklist.id)
        second = await _start(client, inspector_token, checklist.id)

        assert second["inspection_id"] == first["inspection_id"]
        assert second["resumed"] is True
        open_count = await _count(
            db, Inspection,
            Inspection.inspector_id == inspector_user.id,
            Inspection.checklist_id == checklist.id,
            Inspection.submitted_at.is_(None),
        )
        assert open_count == 1

    async def test_start_after_submit_creates_new_inspection(self, client, checklist, inspector_token):
        first = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{first['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass", "pass", "pass"])},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200

        second = await _start(client, inspector_token, checklist.id)
        assert second["inspection_id"] != first["inspection_id"]
        assert second["resumed"] is False

    async def test_each_inspector_gets_own_inspection(
        self, client, checklist, inspector_token, other_inspector_token
    ):
        mine = await _start(client, inspector_token, checklist.id)
        theirs = await _start(client, other_inspector_token, checklist.id)
        assert mine["inspection_id"] != theirs["inspection_id"]

    async def test_start_race_loser_rereads_winner(self, client, db, checklist, inspector_user, inspector_token, monkeypatch):
        """동시 시작 — 고유 인덱스 충돌 시 기존 점검을 다시 읽어 반환."""
        winner = await _start(client, inspector_token, checklist.id)

        original = inspection_repository.get_open_for_inspector
        calls = {"n": 0}

        async def _stale_first_lookup(db_, inspector_id, checklist_id):
            calls["n"] += 1
            if calls["n"] == 1:
                return None
            return await original(db_, inspector_id, checklist_id)

        monkeypatch.setattr(inspection_repository, "get_open_for_inspector", _stale_first_lookup)

        inspection, resumed = await inspection_session_service.start(db, inspector_user.id, checklist.id)
        await db.commit()

        assert resumed is True
        assert str(inspection.id) == winner["inspection_id"]
        assert calls["n"] == 2
        assert await _count(db, Inspection, Inspection.inspector_id == inspector_user.id) == 1

    async def test_start_race_without_winner_reraises(self, db, checklist, inspector_user, monkeypatch):
        await inspection_session_service.start(db, inspector_user.id, checklist.id)
        await db.commit()

        async def _never_found(db_, inspector_id, checklist_id):
            return None

        monkeypatch.setattr(inspection_repository, "get_open_for_inspector", _never_found)
        with pytest.raises(IntegrityError):
            await inspection_session_service.start(db, inspector_user.id, checklist.id)

    async def test_start_inactive_checklist_404(self, client, db, inspector_token):
        inactive = await make_checklist(db, [("Item", True)], is_active=False)
        resp = await client.post(
            f"{API}/start", json={"checklist_id": str(inactive.id)}, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Checklist not found or inactive"

    async def test_start_unknown_checklist_404(self, client, inspector_token):
        resp = await client.post(
            f"{API}/start", json={"checklist_id": str(uuid4())}, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 404

    async def test_start_requires_token(self, client, checklist):
        resp = await client.post(f"{API}/start", json={"checklist_id": str(checklist.id)})
        assert resp.status_code == 401

    async def test_start_rejects_garbage_token(self, client, checklist):
        resp = await client.post(
            f"{API}/start", json={"checklist_id": str(checklist.id)}, headers=auth_header("not-a-jwt")
        )
        assert resp.status_code == 401


# === 제출 (Submit) ===

class TestSubmit:
    async def test_scenario_a_critical_failures_create_actions(
        self, client, db, checklist, inspector_user, inspector_token, admin_user, manager_user
    ):
        """3개 항목(치명 2) — pass/fail/fail 제출 시 시정 조치 2건."""
        started = await _start(client, inspector_token, checklist.id)
        inspection_id = started["inspection_id"]

        resp = await client.post(
            f"{API}/{inspection_id}/submit",
            json={"responses": _entries(checklist, ["pass", "fail", "fail"])},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["qualifying_failures"] == 2
        assert body["created_actions"] == 2
        assert body["failed_item_ids"] == []
        assert body["notified_recipients"] == 2

        stats = (await client.get(f"{API}/{inspection_id}/stats", headers=auth_header(inspector_token))).json()
        assert stats == {"total": 3, "passed": 1, "failed": 2, "na": 0, "critical_fails": 2}

        actions = (await db.execute(select(CorrectiveAction))).scalars().all()
        assert len(actions) == 2
        submitted_at = (await db.get(Inspection, actions[0].inspection_id)).submitted_at
        for action in actions:
            assert action.priority == "high"
            assert action.status == "pending"
            assert action.created_by == inspector_user.id
            assert str(action.inspection_id) == inspection_id
            assert action.target_date.replace(tzinfo=None) == (submitted_at + timedelta(days=7)).replace(tzinfo=None)
        assert sorted(a.action_plan for a in actions) == [
            "Inspection failure: Extinguisher pressure in green zone",
            "Inspection failure: Fire doors unobstructed",
        ]

    async def test_scenario_c_all_na_has_no_side_effects(
        self, client, db, checklist, inspector_token, admin_user, manager_user
    ):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["na", "na", "na"])},
            headers=auth_header(inspector_token),
        )
        body = resp.json()
        assert body["qualifying_failures"] == 0
        assert body["created_actions"] == 0
        assert body["notified_recipients"] == 0

        stats = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()
        assert stats["na"] == 3
        assert stats["total"] == 3
        assert await _count(db, CorrectiveAction) == 0
        assert await _count(db, Notification) == 0

    async def test_scenario_d_resubmit_conflicts_and_changes_nothing(self, client, db, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        url = f"{API}/{started['inspection_id']}/submit"
        payload = {"responses": _entries(checklist, ["pass", "fail", "na"])}

        first = await client.post(url, json=payload, headers=auth_header(inspector_token))
        assert first.status_code == 200
        before = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()

        second = await client.post(url, json=payload, headers=auth_header(inspector_token))
        assert second.status_code == 409
        assert second.json()["detail"] == "Inspection already submitted"

        after = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()
        assert after == before
        assert await _count(db, InspectionResponse) == 3
        assert await _count(db, CorrectiveAction) == 1

    async def test_non_critical_failure_skips_escalation_and_notification(
        self, client, db, checklist, inspector_token, admin_user
    ):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["fail", "pass", "pass"])},
            headers=auth_header(inspector_token),
        )
        body = resp.json()
        assert body["qualifying_failures"] == 0
        assert body["created_actions"] == 0
        assert await _count(db, CorrectiveAction) == 0
        assert await _count(db, Notification) == 0

    async def test_note_and_photos_flow_into_action(self, client, db, inspector_token):
        checklist = await make_checklist(db, [("Guard rails fitted", True)])
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{
                "item_id": str(checklist.items[0].id),
                "result": "fail",
                "note": "Rail missing on level 2",
                "photos": ["data:image/png;base64,AAAA", "photos/rail.jpg"],
            }]},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200
        action = (await db.execute(select(CorrectiveAction))).scalar_one()
        assert action.corrective_action == "Rail missing on level 2"
        assert action.attachments == ["data:image/png;base64,AAAA", "photos/rail.jpg"]

    async def test_missing_note_uses_fallback_text(self, client, db, inspector_token):
        checklist = await make_checklist(db, [("Guard rails fitted", True)])
        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{"item_id": str(checklist.items[0].id), "result": "fail"}]},
            headers=auth_header(inspector_token),
        )
        action = (await db.execute(select(CorrectiveAction))).scalar_one()
        assert action.corrective_action == "Critical item failed inspection - requires immediate attention"

    async def test_omitted_result_defaults_to_na(self, client, db, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{"item_id": str(item.id)} for item in checklist.items]},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200
        results = (await db.execute(select(InspectionResponse.result))).scalars().all()
        assert results == ["na", "na", "na"]

    async def test_partial_submission_is_accepted(self, client, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass"])},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200
        stats = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()
        assert stats["total"] == 1

    async def test_duplicate_item_rejected(self, client, db, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        item_id = str(checklist.items[0].id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{"item_id": item_id, "result": "pass"}, {"item_id": item_id, "result": "fail"}]},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 422
        assert "Duplicate" in resp.json()["detail"]
        # 거부된 제출은 점검을 열린 상태로 유지 — Rejected payload leaves the inspection open
        again = await _start(client, inspector_token, checklist.id)
        assert again["inspection_id"] == started["inspection_id"]

    async def test_foreign_item_rejected(self, client, db, checklist, inspector_token):
        other = await make_checklist(db, [("Unrelated", True)], name="Electrical")
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{"item_id": str(other.items[0].id), "result": "fail"}]},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 422
        assert await _count(db, InspectionResponse) == 0

    async def test_invalid_result_tag_rejected(self, client, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [{"item_id": str(checklist.items[0].id), "result": "maybe"}]},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 422

    async def test_submit_other_inspectors_inspection_forbidden(
        self, client, checklist, inspector_token, other_inspector_token
    ):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass", "pass", "pass"])},
            headers=auth_header(other_inspector_token),
        )
        assert resp.status_code == 403

    async def test_submit_unknown_inspection_404(self, client, inspector_token, checklist):
        resp = await client.post(
            f"{API}/{uuid4()}/submit", json={"responses": []}, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 404

    async def test_stale_submission_loses_compare_and_set(self, client, db, checklist, inspector_user, inspector_token):
        """동시 제출의 패자 — 메모리 상 미제출이어도 DB 기준으로 409."""
        from sqlalchemy.orm.attributes import set_committed_value

        from safetyhub.schemas.inspection import ResponseEntry
        from safetyhub.services.response_collector import response_collector
        from safetyhub.utils.exceptions import AlreadySubmittedError

        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass", "pass", "pass"])},
            headers=auth_header(inspector_token),
        )

        inspection = await inspection_repository.get_with_checklist(db, UUID(started["inspection_id"]))
        set_committed_value(inspection, "submitted_at", None)
        with pytest.raises(AlreadySubmittedError):
            await response_collector.submit(
                db, inspection, [ResponseEntry(item_id=checklist.items[0].id, result="fail")]
            )
        assert await _count(db, InspectionResponse) == 3


# === 부분 실패 (Partial failure) ===

class TestPartialFailure:
    async def test_action_creation_failure_is_reported_as_counts(
        self, client, db, inspector_token, admin_user, monkeypatch
    ):
        checklist = await make_checklist(db, [("A", True), ("B", True), ("C", True)])
        item_ids = [str(item.id) for item in checklist.items]
        payload = {"responses": _entries(checklist, ["fail", "fail", "fail"])}
        original = corrective_action_repository.create
        calls = {"n": 0}

        async def _fail_second(db_, obj_data):
            calls["n"] += 1
            if calls["n"] == 2:
                raise SQLAlchemyError("simulated insert failure")
            return await original(db_, obj_data)

        monkeypatch.setattr(corrective_action_repository, "create", _fail_second)

        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["qualifying_failures"] == 3
        assert body["created_actions"] == 2
        assert body["failed_item_ids"] == [item_ids[1]]
        assert "2 of 3" in body["message"]

        # 응답은 모두 저장되고 알림은 치명 실패 수 기준으로 발송
        assert await _count(db, InspectionResponse) == 3
        assert await _count(db, CorrectiveAction) == 2
        notification = (await db.execute(select(Notification))).scalar_one()
        assert "3 critical failure(s)" in notification.message

    async def test_side_effect_commit_failure_keeps_responses(
        self, client, db, checklist, inspector_token, monkeypatch
    ):
        critical_ids = sorted(str(item.id) for item in checklist.items if item.critical)
        payload = {"responses": _entries(checklist, ["pass", "fail", "fail"])}
        started = await _start(client, inspector_token, checklist.id)

        original_commit = db.commit
        calls = {"n": 0}

        async def _fail_second_commit():
            # 1 = 응답 저장, 2 = 시정 조치 (1 = responses, 2 = corrective actions)
            calls["n"] += 1
            if calls["n"] == 2:
                raise SQLAlchemyError("simulated commit failure")
            await original_commit()

        monkeypatch.setattr(db, "commit", _fail_second_commit)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        monkeypatch.undo()

        assert resp.status_code == 200
        body = resp.json()
        assert body["qualifying_failures"] == 2
        assert body["created_actions"] == 0
        assert sorted(body["failed_item_ids"]) == critical_ids
        assert await _count(db, InspectionResponse) == 3
        assert await _count(db, CorrectiveAction) == 0

    async def test_notification_failure_never_fails_submission(
        self, client, db, checklist, inspector_token, admin_user, manager_user, monkeypatch
    ):
        async def _smtp_down(**kwargs):
            raise aiosmtplib.SMTPException("relay unavailable")

        monkeypatch.setattr(notification_service_module, "email_enabled", lambda: True)
        monkeypatch.setattr(notification_service_module, "send_email", _smtp_down)

        payload = {"responses": _entries(checklist, ["pass", "fail", "pass"])}
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["created_actions"] == 1
        assert body["qualifying_failures"] == 1
        assert body["notified_recipients"] == 0
        assert await _count(db, CorrectiveAction) == 1

    async def test_one_recipient_failure_does_not_block_others(
        self, client, db, checklist, inspector_token, admin_user, manager_user, monkeypatch
    ):
        original = notification_repository.create_notification
        admin_id = admin_user.id

        async def _fail_for_admin(db_, user_id, **kwargs):
            if user_id == admin_id:
                raise SQLAlchemyError("simulated insert failure")
            return await original(db_, user_id, **kwargs)

        monkeypatch.setattr(notification_repository, "create_notification", _fail_for_admin)

        payload = {"responses": _entries(checklist, ["pass", "fail", "pass"])}
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 200
        assert resp.json()["notified_recipients"] == 1
        rows = (await db.execute(select(Notification))).scalars().all()
        assert [n.user_id for n in rows] == [manager_user.id]

    async def test_unexpected_delivery_error_never_fails_submission(
        self, client, db, checklist, inspector_token, admin_user, manager_user, monkeypatch
    ):
        async def _broken_transport(**kwargs):
            raise RuntimeError("transport exploded")

        monkeypatch.setattr(notification_service_module, "email_enabled", lambda: True)
        monkeypatch.setattr(notification_service_module, "send_email", _broken_transport)

        payload = {"responses": _entries(checklist, ["pass", "fail", "pass"])}
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        assert resp.status_code == 200
        assert resp.json()["created_actions"] == 1
        assert resp.json()["notified_recipients"] == 0

    async def test_multiline_checklist_name_stays_in_subject(
        self, client, db, inspector_token, admin_user, manager_user, monkeypatch
    ):
        checklist = await make_checklist(db, [("Extinguisher", True)], name="Fire\nBcc: x@evil.test")
        sent: list = []

        async def _fake_send(message, **kwargs):
            # 실제 직렬화 수행 — Serialise exactly as the SMTP client would
            message.as_string()
            sent.append(message)

        monkeypatch.setattr(settings, "SMTP_FROM_EMAIL", "safety@test.com")
        monkeypatch.setattr(aiosmtplib, "send", _fake_send)

        started = await _start(client, inspector_token, checklist.id)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["fail"])},
            headers=auth_header(inspector_token),
        )
        assert resp.status_code == 200
        assert resp.json()["notified_recipients"] == 2
        assert len(sent) == 2
        for message in sent:
            assert message["Subject"] == "Inspection Failed: Fire Bcc: x@evil.test"
            assert message["Bcc"] is None

    async def test_response_read_back_failure_reports_all_failed(
        self, client, db, checklist, inspector_token, admin_user, monkeypatch
    ):
        critical_ids = sorted(str(item.id) for item in checklist.items if item.critical)
        payload = {"responses": _entries(checklist, ["pass", "fail", "fail"])}
        started = await _start(client, inspector_token, checklist.id)

        async def _db_blip(db_, inspection_id):
            raise OperationalError("SELECT", {}, Exception("db blip"))

        monkeypatch.setattr(inspection_repository, "get_responses_with_items", _db_blip)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        monkeypatch.undo()

        assert resp.status_code == 200
        body = resp.json()
        assert body["qualifying_failures"] == 2
        assert body["created_actions"] == 0
        assert sorted(body["failed_item_ids"]) == critical_ids
        assert body["notified_recipients"] == 1
        assert await _count(db, InspectionResponse) == 3
        assert await _count(db, CorrectiveAction) == 0
        notification = (await db.execute(select(Notification))).scalar_one()
        assert "2 critical failure(s)" in notification.message

        # 재제출은 충돌 — The submission itself is committed
        again = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        assert again.status_code == 409

    async def test_notification_commit_failure_reports_no_recipients(
        self, client, db, checklist, inspector_token, admin_user, manager_user, monkeypatch
    ):
        payload = {"responses": _entries(checklist, ["pass", "fail", "pass"])}
        started = await _start(client, inspector_token, checklist.id)

        original_commit = db.commit
        calls = {"n": 0}

        async def _fail_third_commit():
            # 3 = 알림 (3 = notifications)
            calls["n"] += 1
            if calls["n"] == 3:
                raise SQLAlchemyError("simulated commit failure")
            await original_commit()

        monkeypatch.setattr(db, "commit", _fail_third_commit)
        resp = await client.post(
            f"{API}/{started['inspection_id']}/submit", json=payload, headers=auth_header(inspector_token)
        )
        monkeypatch.undo()

        assert resp.status_code == 200
        body = resp.json()
        assert body["created_actions"] == 1
        assert body["notified_recipients"] == 0
        assert await _count(db, CorrectiveAction) == 1
        assert await _count(db, Notification) == 0


# === 통계/보고서 (Stats / Report) ===

class TestStatsAndReport:
    async def test_open_inspection_reports_zero_counts(self, client, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        stats = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()
        assert stats == {"total": 0, "passed": 0, "failed": 0, "na": 0, "critical_fails": 0}

        report = (await client.get(f"{API}/{started['inspection_id']}/report", headers=auth_header(inspector_token))).json()
        assert report["metadata"]["submitted_at"] is None
        assert report["results"] == []
        assert report["actions_notice"] is None

    @pytest.mark.parametrize(
        "results",
        [
            ["pass", "fail", "fail"],
            ["fail", "na", "pass"],
            ["na", "na", "na"],
            ["fail", "fail", "fail"],
        ],
    )
    async def test_report_summary_matches_stats(self, client, checklist, inspector_token, results):
        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, results)},
            headers=auth_header(inspector_token),
        )
        stats = (await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(inspector_token))).json()
        report = (await client.get(f"{API}/{started['inspection_id']}/report", headers=auth_header(inspector_token))).json()

        expected_critical = sum(
            1 for item, result in zip(checklist.items, results) if result == "fail" and item.critical
        )
        assert stats["critical_fails"] == expected_critical
        assert report["summary"] == stats

    async def test_report_sections(self, client, checklist, inspector_user, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": [
                {"item_id": str(checklist.items[2].id), "result": "fail", "note": "Blocked by pallets", "photos": ["p1", "p2"]},
                {"item_id": str(checklist.items[0].id), "result": "pass"},
                {"item_id": str(checklist.items[1].id), "result": "na"},
            ]},
            headers=auth_header(inspector_token),
        )
        report = (await client.get(f"{API}/{started['inspection_id']}/report", headers=auth_header(inspector_token))).json()

        assert report["header"]["title"] == "Inspection Report"
        assert report["metadata"]["reference"] == f"INS-{started['inspection_id']}"
        assert report["metadata"]["inspector_name"] == inspector_user.full_name
        # 제출 순서 유지 — Rows keep submitted order
        assert [row["item_text"] for row in report["results"]] == [
            "Fire doors unobstructed", "Exit signs illuminated", "Extinguisher pressure in green zone",
        ]
        assert [row["index"] for row in report["results"]] == [1, 2, 3]
        assert report["failed_items"] == [
            {"item_text": "Fire doors unobstructed", "critical": True, "note": "Blocked by pallets", "photo_count": 2}
        ]
        assert report["actions_notice"].startswith("1 critical failure(s) detected")

    async def test_pdf_download(self, client, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass", "fail", "na"], note="checked")},
            headers=auth_header(inspector_token),
        )
        resp = await client.get(f"{API}/{started['inspection_id']}/pdf", headers=auth_header(inspector_token))
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert resp.content.startswith(b"%PDF")
        assert f"inspection-report-{started['inspection_id']}.pdf" in resp.headers["content-disposition"]

    async def test_detail_includes_responses(self, client, checklist, inspector_token):
        started = await _start(client, inspector_token, checklist.id)
        await client.post(
            f"{API}/{started['inspection_id']}/submit",
            json={"responses": _entries(checklist, ["pass", "fail", "na"])},
            headers=auth_header(inspector_token),
        )
        detail = (await client.get(f"{API}/{started['inspection_id']}", headers=auth_header(inspector_token))).json()
        assert detail["checklist_name"] == "Fire Safety"
        assert [r["result"] for r in detail["responses"]] == ["pass", "fail", "na"]
        assert detail["stats"]["critical_fails"] == 1

    async def test_list_my_inspections(self, client, checklist, inspector_token, other_inspector_token):
        await _start(client, inspector_token, checklist.id)
        await _start(client, other_inspector_token, checklist.id)

        resp = await client.get(API, headers=auth_header(inspector_token))
        body = resp.json()
        assert body["total"] == 1
        assert body["items"][0]["stats"]["total"] == 0

    async def test_manager_can_read_any_inspection(self, client, checklist, inspector_token, manager_token):
        started = await _start(client, inspector_token, checklist.id)
        resp = await client.get(f"{API}/{started['inspection_id']}/stats", headers=auth_header(manager_token))
        assert resp.status_code == 200

    async def test_other_inspector_cannot_read(self, client, checklist, inspector_token, worker_token):
        started = await _start(client, inspector_token, checklist.id)
        for path in ("stats", "report", "pdf"):
            resp = await client.get(f"{API}/{started['inspection_id']}/{path}", headers=auth_header(worker_token))
            assert resp.status_code == 403

    async def test_stats_unknown_inspection_404(self, client, inspector_token):
        resp = await client.get(f"{API}/{uuid4()}/stats", headers=auth_header(inspector_token))
        assert resp.status_code == 404
