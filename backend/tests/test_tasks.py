"""Test Tasks 동작과 회귀 시나리오를 검증하는 자동화 테스트입니다."""

from datetime import timedelta

import pytest

from teamspace.models.notification import Notification
from teamspace.models.task import Comment, Task
from teamspace.utils.helpers import utcnow
from tests.conftest import auth_headers


def _future(days=7) -> str:
    return (utcnow() + timedelta(days=days)).replace(microsecond=0).isoformat()


@pytest.fixture
def headers(client, seed_users, seed_project):
    return {
        "alice": auth_headers(client, "alice@example.com"),
        "bob": auth_headers(client, "bob@example.com"),
        "carol": auth_headers(client, "carol@example.com"),
        "dave": auth_headers(client, "dave@example.com"),
    }


def _create(client, headers, project_id, **overrides):
    payload = {"title": "Write docs", "project_id": project_id}
    payload.update(overrides)
    return client.post("/api/tasks", json=payload, headers=headers)


def _notes(db, user_id, noti_type=None):
    db.expire_all()
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if noti_type:
        q = q.filter(Notification.noti_type == noti_type)
    return q.all()


def test_create_task_notifies_assignee_with_priority(client, db, seed_users, seed_project, headers):
    pid = seed_project.project_id
    bob_id = seed_users["bob"].user_id
    resp = _create(client, headers["alice"], pid, assigned_to=bob_id, priority="urgent", due_date=_future())
    assert resp.status_code == 201, resp.text
    task = resp.json()["data"]["task"]
    assert task["status"] == "todo"
    assert task["assignee_name"] == "Bob"
    assert task["project_name"] == "Apollo"
    assert task["completion_percentage"] == 0
    assert task["is_overdue"] is False

    notes = _notes(db, bob_id)
    assert len(notes) == 1
    assert notes[0].noti_type == "task_assigned"
    assert notes[0].priority == "high"
    assert notes[0].action_url == f"/tasks/{task['task_id']}"
    assert notes[0].related_entity == {"type": "task", "id": task["task_id"]}

    _create(client, headers["alice"], pid, assigned_to=bob_id, priority="low")
    assert sorted(n.priority for n in _notes(db, bob_id)) == ["high", "medium"]


def test_self_assignment_does_not_notify(client, db, seed_users, seed_project, headers):
    alice_id = seed_users["alice"].user_id
    resp = _create(client, headers["alice"], seed_project.project_id, assigned_to=alice_id)
    assert resp.status_code == 201
    assert _notes(db, alice_id) == []


def test_create_task_rules(client, seed_users, seed_project, headers, db):
    pid = seed_project.project_id
    assert _create(client, headers["dave"], pid).status_code == 403
    assert _create(client, headers["carol"], pid).status_code == 403
    assert _create(client, headers["alice"], 9999).status_code == 404
    resp = _create(client, headers["alice"], pid, assigned_to=seed_users["dave"].user_id)
    assert resp.status_code == 400
    resp = _create(client, headers["alice"], pid, due_date=(utcnow() - timedelta(days=1)).isoformat())
    assert resp.status_code == 400
    assert _create(client, headers["alice"], pid, title="").status_code == 400
    assert _create(client, headers["alice"], pid, priority="critical").status_code == 400
    assert _create(client, headers["alice"], pid, estimated_hours=-1).status_code == 400
    assert db.query(Task).count() == 0


def test_dependencies_must_share_project(client, db, seed_users, seed_project, headers):
    pid = seed_project.project_id
    first = _create(client, headers["alice"], pid).json()["data"]["task"]

    resp = _create(client, headers["alice"], pid, title="Second", dependencies=[first["task_id"]])
    assert resp.status_code == 201
    assert resp.json()["data"]["task"]["dependencies"] == [first["task_id"]]

    resp = client.post(
        "/api/projects",
        json={"name": "Other", "description": "x", "start_date": "2026-01-01"},
        headers=headers["alice"],
    )
    other_pid = resp.json()["data"]["project"]["project_id"]
    resp = _create(client, headers["alice"], other_pid, dependencies=[first["task_id"]])
    assert resp.status_code == 400


def test_list_tasks_scoped_and_filtered(client, seed_users, seed_project, headers):
    pid = seed_project.project_id
    bob_id = seed_users["bob"].user_id
    _create(client, headers["alice"], pid, title="Alpha", priority="high", assigned_to=bob_id)
    _create(client, headers["alice"], pid, title="Beta 50%", priority="low")

    resp = client.get("/api/tasks", headers=headers["bob"])
    assert resp.json()["data"]["pagination"]["total"] == 2
    titles = [t["title"] for t in resp.json()["data"]["tasks"]]
    assert titles == ["Beta 50%", "Alpha"]

    resp = client.get("/api/tasks", params={"assigned_to": bob_id}, headers=headers["bob"])
    assert [t["title"] for t in resp.json()["data"]["tasks"]] == ["Alpha"]
    resp = client.get("/api/tasks", params={"priority": "low", "status": "all"}, headers=headers["bob"])
    assert [t["title"] for t in resp.json()["data"]["tasks"]] == ["Beta 50%"]
    resp = client.get("/api/tasks", params={"search": "50%"}, headers=headers["bob"])
    assert [t["title"] for t in resp.json()["data"]["tasks"]] == ["Beta 50%"]

    assert client.get("/api/tasks", headers=headers["dave"]).json()["data"]["tasks"] == []
    resp = client.get("/api/tasks", params={"project_id": pid}, headers=headers["dave"])
    assert resp.status_code == 403


def test_update_to_completed_fills_hours_and_notifies_once(client, db, seed_users, seed_project, headers):
    bob_id = seed_users["bob"].user_id
    task = _create(
        client, headers["alice"], seed_project.project_id, assigned_to=bob_id, estimated_hours=5
    ).json()["data"]["task"]

    resp = client.put(f"/api/tasks/{task['task_id']}", json={"status": "completed"}, headers=headers["bob"])
    assert resp.status_code == 200
    updated = resp.json()["data"]["task"]
    assert updated["completed_at"] is not None
    assert updated["actual_hours"] == 5
    assert updated["completion_percentage"] == 100

    completed = _notes(db, bob_id, "task_completed")
    assert len(completed) == 1
    assert completed[0].priority == "medium"

    client.put(f"/api/tasks/{task['task_id']}", json={"status": "completed"}, headers=headers["bob"])
    assert len(_notes(db, bob_id, "task_completed")) == 1

    resp = client.put(f"/api/tasks/{task['task_id']}", json={"status": "review"}, headers=headers["bob"])
    assert resp.json()["data"]["task"]["completed_at"] is None


def test_completion_notifications_without_dedup(client, db, seed_users, seed_project, headers, monkeypatch):
    from teamspace.config import settings

    monkeypatch.setattr(settings, "DEDUPLICATE_TASK_COMPLETED", False)
    bob_id = seed_users["bob"].user_id
    task = _create(client, headers["alice"], seed_project.project_id, assigned_to=bob_id).json()["data"]["task"]
    client.put(f"/api/tasks/{task['task_id']}", json={"status": "completed"}, headers=headers["alice"])
    client.put(f"/api/tasks/{task['task_id']}", json={"status": "completed"}, headers=headers["alice"])
    assert len(_notes(db, bob_id, "task_completed")) == 2


def test_reassignment_notifies_new_assignee(client, db, seed_users, seed_project, headers):
    bob_id = seed_users["bob"].user_id
    carol_id = seed_users["carol"].user_id
    task = _create(client, headers["alice"], seed_project.project_id, assigned_to=bob_id).json()["data"]["task"]

    resp = client.put(f"/api/tasks/{task['task_id']}", json={"assigned_to": carol_id}, headers=headers["alice"])
    assert resp.status_code == 200
    assert len(_notes(db, carol_id, "task_assigned")) == 1

    client.put(f"/api/tasks/{task['task_id']}", json={"assigned_to": carol_id, "title": "Renamed"},
               headers=headers["alice"])
    assert len(_notes(db, carol_id, "task_assigned")) == 1

    resp = client.put(f"/api/tasks/{task['task_id']}", json={"assigned_to": seed_users["dave"].user_id},
                      headers=headers["alice"])
    assert resp.status_code == 400


def test_update_due_date_must_follow_creation(client, seed_project, headers):
    task = _create(client, headers["alice"], seed_project.project_id).json()["data"]["task"]
    resp = client.put(f"/api/tasks/{task['task_id']}", json={"due_date": "2020-01-01T00:00:00"},
                      headers=headers["alice"])
    assert resp.status_code == 400
    resp = client.put(f"/api/tasks/{task['task_id']}", json={"due_date": _future(3)}, headers=headers["alice"])
    assert resp.status_code == 200


def test_delete_task_creator_or_admin(client, db, seed_users, seed_project, headers):
    pid = seed_project.project_id
    task = _create(client, headers["bob"], pid).json()["data"]["task"]
    client.post(f"/api/tasks/{task['task_id']}/comments", json={"content": "first"}, headers=headers["bob"])

    assert client.delete(f"/api/tasks/{task['task_id']}", headers=headers["carol"]).status_code == 403
    assert client.delete(f"/api/tasks/{task['task_id']}", headers=headers["alice"]).status_code == 200
    db.expire_all()
    assert db.query(Task).count() == 0
    assert db.query(Comment).count() == 0

    own = _create(client, headers["bob"], pid).json()["data"]["task"]
    assert client.delete(f"/api/tasks/{own['task_id']}", headers=headers["bob"]).status_code == 200
    assert client.delete(f"/api/tasks/{own['task_id']}", headers=headers["bob"]).status_code == 404


def test_comments_threading_and_detail(client, seed_project, headers):
    task = _create(client, headers["alice"], seed_project.project_id).json()["data"]["task"]
    tid = task["task_id"]
    parent = client.post(f"/api/tasks/{tid}/comments", json={"content": "Looks good"}, headers=headers["bob"])
    assert parent.status_code == 201
    parent_id = parent.json()["data"]["comment"]["comment_id"]
    reply = client.post(f"/api/tasks/{tid}/comments", json={"content": "Thanks", "parent_id": parent_id},
                        headers=headers["alice"])
    assert reply.status_code == 201

    other = _create(client, headers["alice"], seed_project.project_id, title="Other").json()["data"]["task"]
    resp = client.post(f"/api/tasks/{other['task_id']}/comments", json={"content": "x", "parent_id": parent_id},
                       headers=headers["alice"])
    assert resp.status_code == 400
    resp = client.post(f"/api/tasks/{tid}/comments", json={"content": "y" * 1001}, headers=headers["alice"])
    assert resp.status_code == 400
    resp = client.post(f"/api/tasks/{tid}/comments", json={"content": "z"}, headers=headers["dave"])
    assert resp.status_code == 403

    detail = client.get(f"/api/tasks/{tid}", headers=headers["carol"]).json()["data"]["task"]
    assert [c["content"] for c in detail["comments"]] == ["Looks good", "Thanks"]
    assert detail["comments"][0]["author_name"] == "Bob"


def test_comment_edit_delete_and_reactions(client, seed_users, seed_project, headers):
    tid = _create(client, headers["alice"], seed_project.project_id).json()["data"]["task"]["task_id"]
    cid = client.post(f"/api/tasks/{tid}/comments", json={"content": "typo"},
                      headers=headers["bob"]).json()["data"]["comment"]["comment_id"]

    assert client.put(f"/api/comments/{cid}", json={"content": "hijack"}, headers=headers["alice"]).status_code == 403
    resp = client.put(f"/api/comments/{cid}", json={"content": "fixed"}, headers=headers["bob"])
    assert resp.json()["data"]["comment"]["is_edited"] is True
    assert resp.json()["data"]["comment"]["content"] == "fixed"

    client.post(f"/api/comments/{cid}/reactions", json={"emoji": "👍"}, headers=headers["bob"])
    resp = client.post(f"/api/comments/{cid}/reactions", json={"emoji": "👍"}, headers=headers["alice"])
    assert resp.json()["data"]["comment"]["reactions"] == [
        {"emoji": "👍", "users": [seed_users["bob"].user_id, seed_users["alice"].user_id]}
    ]
    client.delete(f"/api/comments/{cid}/reactions", params={"emoji": "👍"}, headers=headers["bob"])
    resp = client.delete(f"/api/comments/{cid}/reactions", params={"emoji": "👍"}, headers=headers["alice"])
    assert resp.json()["data"]["comment"]["reactions"] == []

    assert client.delete(f"/api/comments/{cid}", headers=headers["carol"]).status_code == 403
    assert client.delete(f"/api/comments/{cid}", headers=headers["alice"]).status_code == 200
    assert client.delete(f"/api/comments/{cid}", headers=headers["alice"]).status_code == 404


def test_subtasks_drive_completion_percentage(client, seed_project, headers):
    tid = _create(client, headers["alice"], seed_project.project_id).json()["data"]["task"]["task_id"]
    for title in ("one", "two", "three"):
        resp = client.post(f"/api/tasks/{tid}/subtasks", json={"title": title}, headers=headers["bob"])
        assert resp.status_code == 201

    resp = client.put(f"/api/tasks/{tid}/subtasks/0/toggle", headers=headers["bob"])
    assert resp.json()["data"]["task"]["completion_percentage"] == 33
    resp = client.put(f"/api/tasks/{tid}/subtasks/1/toggle", headers=headers["bob"])
    assert resp.json()["data"]["task"]["completion_percentage"] == 67
    resp = client.delete(f"/api/tasks/{tid}/subtasks/2", headers=headers["bob"])
    task = resp.json()["data"]["task"]
    assert [s["title"] for s in task["subtasks"]] == ["one", "two"]
    assert task["completion_percentage"] == 100

    assert client.put(f"/api/tasks/{tid}/subtasks/5/toggle", headers=headers["bob"]).status_code == 404


def test_watch_and_unwatch(client, seed_users, seed_project, headers):
    tid = _create(client, headers["alice"], seed_project.project_id).json()["data"]["task"]["task_id"]
    bob_id = seed_users["bob"].user_id
    client.post(f"/api/tasks/{tid}/watch", headers=headers["bob"])
    resp = client.post(f"/api/tasks/{tid}/watch", headers=headers["bob"])
    assert resp.json()["data"]["task"]["watchers"] == [bob_id]
    resp = client.delete(f"/api/tasks/{tid}/watch", headers=headers["bob"])
    assert resp.json()["data"]["task"]["watchers"] == []
    assert client.post(f"/api/tasks/{tid}/watch", headers=headers["dave"]).status_code == 403


def test_viewer_cannot_modify_tasks(client, db, seed_users, seed_project, headers):
    bob_id = seed_users["bob"].user_id
    tid = _create(client, headers["alice"], seed_project.project_id, assigned_to=bob_id).json()["data"]["task"]["task_id"]
    client.post(f"/api/tasks/{tid}/subtasks", json={"title": "draft"}, headers=headers["bob"])

    resp = client.put(f"/api/tasks/{tid}", json={"status": "completed", "assigned_to": bob_id},
                      headers=headers["carol"])
    assert resp.status_code == 403
    assert client.post(f"/api/tasks/{tid}/subtasks", json={"title": "x"}, headers=headers["carol"]).status_code == 403
    assert client.put(f"/api/tasks/{tid}/subtasks/0/toggle", headers=headers["carol"]).status_code == 403
    assert client.delete(f"/api/tasks/{tid}/subtasks/0", headers=headers["carol"]).status_code == 403

    db.expire_all()
    task = db.get(Task, tid)
    assert task.status == "todo"
    assert [s["completed"] for s in task.subtasks] == [False]
    assert _notes(db, bob_id, "task_completed") == []

    # viewer도 댓글은 남길 수 있다.
    assert client.post(f"/api/tasks/{tid}/comments", json={"content": "LGTM"}, headers=headers["carol"]).status_code == 201


def test_completion_notifies_assignee_before_reassignment(client, db, seed_users, seed_project, headers):
    alice_id = seed_users["alice"].user_id
    bob_id = seed_users["bob"].user_id
    tid = _create(client, headers["alice"], seed_project.project_id, assigned_to=bob_id).json()["data"]["task"]["task_id"]

    resp = client.put(f"/api/tasks/{tid}", json={"status": "completed", "assigned_to": alice_id},
                      headers=headers["alice"])
    assert resp.status_code == 200
    assert resp.json()["data"]["task"]["assigned_to"] == alice_id
    assert len(_notes(db, bob_id, "task_completed")) == 1
    assert _notes(db, alice_id) == []


def test_failed_dispatch_does_not_fail_request(client, db, seed_users, seed_project, headers, monkeypatch):
    from teamspace.services import notification_service

    def broken(*args, **kwargs):
        raise RuntimeError("notification store unavailable")

    monkeypatch.setattr(notification_service, "create_notification", broken)
    bob_id = seed_users["bob"].user_id
    resp = _create(client, headers["alice"], seed_project.project_id, assigned_to=bob_id, priority="urgent")
    assert resp.status_code == 201
    tid = resp.json()["data"]["task"]["task_id"]

    resp = client.put(f"/api/tasks/{tid}", json={"status": "completed"}, headers=headers["bob"])
    assert resp.status_code == 200

    db.expire_all()
    assert db.query(Task).count() == 1
    assert db.get(Task, tid).status == "completed"
    assert db.query(Notification).count() == 0
