"""Test Discussions 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

import pytest

from teamspace.models.discussion import Discussion
from teamspace.models.notification import Notification
from tests.conftest import auth_headers


@pytest.fixture
def headers(client, seed_users, seed_project):
    return {
        name: auth_headers(client, f"{name}@example.com")
        for name in ("alice", "bob", "carol", "dave")
    }


def _start(client, headers, project_id, title="Kickoff"):
    resp = client.post("/api/discussions", json={"title": title, "project_id": project_id}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["discussion"]


def test_create_discussion_member_only(client, seed_users, seed_project, headers):
    discussion = _start(client, headers["bob"], seed_project.project_id)
    assert discussion["participant_ids"] == [seed_users["bob"].user_id]
    assert discussion["message_count"] == 0
    assert discussion["is_pinned"] is False

    resp = client.post("/api/discussions", json={"title": "Nope", "project_id": seed_project.project_id},
                       headers=headers["dave"])
    assert resp.status_code == 403
    resp = client.post("/api/discussions", json={"title": "", "project_id": seed_project.project_id},
                       headers=headers["bob"])
    assert resp.status_code == 400


def test_post_message_updates_activity_and_participants(client, db, seed_users, seed_project, headers):
    discussion = _start(client, headers["bob"], seed_project.project_id)
    did = discussion["discussion_id"]

    resp = client.post(f"/api/discussions/{did}/messages", json={"content": "Hello team"}, headers=headers["alice"])
    assert resp.status_code == 201
    assert resp.json()["data"]["message"]["author_name"] == "Alice"

    db.expire_all()
    row = db.get(Discussion, did)
    assert row.message_count == 1
    assert row.participant_ids == [seed_users["bob"].user_id, seed_users["alice"].user_id]

    resp = client.post(f"/api/discussions/{did}/messages", json={"content": "x" * 2001}, headers=headers["alice"])
    assert resp.status_code == 400
    resp = client.post(f"/api/discussions/{did}/messages", json={"content": "hi"}, headers=headers["dave"])
    assert resp.status_code == 403


def test_get_discussion_adds_viewer_and_orders_messages(client, seed_users, seed_project, headers):
    did = _start(client, headers["bob"], seed_project.project_id)["discussion_id"]
    for text in ("first", "second", "third"):
        client.post(f"/api/discussions/{did}/messages", json={"content": text}, headers=headers["bob"])

    resp = client.get(f"/api/discussions/{did}", headers=headers["carol"])
    assert resp.status_code == 200
    detail = resp.json()["data"]["discussion"]
    assert [m["content"] for m in detail["messages"]] == ["first", "second", "third"]
    assert seed_users["carol"].user_id in detail["participant_ids"]

    assert client.get(f"/api/discussions/{did}", headers=headers["dave"]).status_code == 403
    assert client.get("/api/discussions/9999", headers=headers["bob"]).status_code == 404


def test_reply_must_stay_in_discussion(client, seed_project, headers):
    first = _start(client, headers["bob"], seed_project.project_id, "One")["discussion_id"]
    second = _start(client, headers["bob"], seed_project.project_id, "Two")["discussion_id"]
    msg = client.post(f"/api/discussions/{first}/messages", json={"content": "root"}, headers=headers["bob"])
    mid = msg.json()["data"]["message"]["message_id"]

    ok = client.post(f"/api/discussions/{first}/messages", json={"content": "reply", "parent_id": mid},
                     headers=headers["alice"])
    assert ok.status_code == 201
    bad = client.post(f"/api/discussions/{second}/messages", json={"content": "reply", "parent_id": mid},
                      headers=headers["alice"])
    assert bad.status_code == 400


def test_mentions_notify_distinct_existing_users_except_author(client, db, seed_users, seed_project, headers):
    did = _start(client, headers["bob"], seed_project.project_id)["discussion_id"]
    alice_id = seed_users["alice"].user_id
    bob_id = seed_users["bob"].user_id
    carol_id = seed_users["carol"].user_id

    resp = client.post(
        f"/api/discussions/{did}/messages",
        json={"content": "@alice @carol please review", "mentions": [alice_id, carol_id, alice_id, bob_id, 9999]},
        headers=headers["bob"],
    )
    assert resp.status_code == 201

    db.expire_all()
    notes = db.query(Notification).filter(Notification.noti_type == "discussion_mention").all()
    assert sorted(n.user_id for n in notes) == sorted([alice_id, carol_id])
    assert all(n.action_url == f"/discussions/{did}" for n in notes)
    assert all(n.related_entity == {"type": "discussion", "id": did} for n in notes)


def test_pin_and_lock_admin_only(client, seed_project, headers):
    did = _start(client, headers["bob"], seed_project.project_id)["discussion_id"]

    assert client.put(f"/api/discussions/{did}/pin", headers=headers["bob"]).status_code == 403
    resp = client.put(f"/api/discussions/{did}/pin", headers=headers["alice"])
    assert resp.json()["data"]["discussion"]["is_pinned"] is True
    resp = client.put(f"/api/discussions/{did}/pin", headers=headers["alice"])
    assert resp.json()["data"]["discussion"]["is_pinned"] is False

    assert client.put(f"/api/discussions/{did}/lock", headers=headers["bob"]).status_code == 403
    resp = client.put(f"/api/discussions/{did}/lock", headers=headers["alice"])
    assert resp.json()["data"]["discussion"]["is_locked"] is True

    resp = client.post(f"/api/discussions/{did}/messages", json={"content": "too late"}, headers=headers["bob"])
    assert resp.status_code == 403


def test_list_pinned_first_then_recent_activity(client, seed_project, headers):
    pid = seed_project.project_id
    old = _start(client, headers["bob"], pid, "Old")["discussion_id"]
    mid = _start(client, headers["bob"], pid, "Middle")["discussion_id"]
    _start(client, headers["bob"], pid, "Newest")
    client.post(f"/api/discussions/{mid}/messages", json={"content": "bump"}, headers=headers["bob"])
    client.put(f"/api/discussions/{old}/pin", headers=headers["alice"])

    resp = client.get("/api/discussions", params={"project_id": pid}, headers=headers["carol"])
    assert [d["title"] for d in resp.json()["data"]["discussions"]] == ["Old", "Middle", "Newest"]

    resp = client.get("/api/discussions", params={"search": "mid"}, headers=headers["carol"])
    assert [d["title"] for d in resp.json()["data"]["discussions"]] == ["Middle"]
    assert client.get("/api/discussions", headers=headers["dave"]).json()["data"]["discussions"] == []


def test_message_reactions(client, seed_users, seed_project, headers):
    did = _start(client, headers["bob"], seed_project.project_id)["discussion_id"]
    mid = client.post(f"/api/discussions/{did}/messages", json={"content": "ship it"},
                      headers=headers["bob"]).json()["data"]["message"]["message_id"]

    resp = client.post(f"/api/messages/{mid}/reactions", json={"emoji": "🚀"}, headers=headers["carol"])
    assert resp.json()["data"]["message"]["reactions"] == [{"emoji": "🚀", "users": [seed_users["carol"].user_id]}]
    resp = client.delete(f"/api/messages/{mid}/reactions", params={"emoji": "🚀"}, headers=headers["carol"])
    assert resp.json()["data"]["message"]["reactions"] == []
    assert client.post(f"/api/messages/{mid}/reactions", json={"emoji": "🚀"},
                       headers=headers["dave"]).status_code == 403
