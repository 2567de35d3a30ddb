"""
Tech support tickets, least-loaded admin assignment and the message thread
"""

from conftest import auth_headers, make_user

from app.models import ROLE_ADMIN, ROLE_CLIENT, TechSupport


def open_ticket(client, user, reason="account", **extra):
    payload = {"title": "Cannot log in", "reason": reason, "description": "Password reset fails", **extra}
    return client.post("/api/tech-support", json=payload, headers=auth_headers(user))


def test_ticket_is_assigned_to_an_admin(client, db, client_user, admin_user):
    response = open_ticket(client, client_user)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "new"
    assert body["priority"] == "normal"
    assert body["supportReason"] == "account"
    assert body["author"] == f"/api/users/{client_user.id}"
    assert body["administrant"] == f"/api/users/{admin_user.id}"


def test_least_loaded_admin_wins(client, db, client_user, master_user):
    busy = make_user(db, "busy@example.com", [ROLE_ADMIN])
    idle = make_user(db, "idle@example.com", [ROLE_ADMIN])
    db.add(TechSupport(title="old", reason="other", status="in_progress", author_id=master_user.id, administrant_id=busy.id))
    # Closed tickets do not count as load
    db.add(TechSupport(title="done", reason="other", status="closed", author_id=master_user.id, administrant_id=idle.id))
    db.commit()

    body = open_ticket(client, client_user).json()

    assert body["administrant"] == f"/api/users/{idle.id}"


def test_ties_go_to_lowest_admin_id(client, db, client_user):
    first = make_user(db, "first@example.com", [ROLE_ADMIN])
    make_user(db, "second@example.com", [ROLE_ADMIN])

    assert open_ticket(client, client_user).json()["administrant"] == f"/api/users/{first.id}"


def test_assignment_spreads_load(client, db, client_user, master_user):
    first = make_user(db, "first@example.com", [ROLE_ADMIN])
    second = make_user(db, "second@example.com", [ROLE_ADMIN])

    a = open_ticket(client, client_user).json()["administrant"]
    b = open_ticket(client, master_user).json()["administrant"]

    assert {a, b} == {f"/api/users/{first.id}", f"/api/users/{second.id}"}


def test_ticket_without_admins_stays_unassigned(client, db, client_user):
    response = open_ticket(client, client_user)
    assert response.status_code == 201
    assert response.json()["administrant"] is None


def test_wrong_reason_and_priority(client, db, client_user):
    assert open_ticket(client, client_user, reason="weather").status_code == 400
    assert open_ticket(client, client_user, priority="whenever").status_code == 400


def test_admin_cannot_open_ticket(client, db, admin_user):
    assert open_ticket(client, admin_user).status_code == 403


def test_only_admin_sets_in_progress(client, db, client_user, admin_user):
    ticket_id = open_ticket(client, client_user).json()["id"]

    response = client.patch(f"/api/tech-support/{ticket_id}", json={"status": "in_progress"}, headers=auth_headers(client_user))
    assert response.status_code == 403

    response = client.patch(f"/api/tech-support/{ticket_id}", json={"status": "in_progress"}, headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"

    response = client.patch(f"/api/tech-support/{ticket_id}", json={"status": "closed"}, headers=auth_headers(client_user))
    assert response.json()["status"] == "closed"


def test_status_update_rules(client, db, client_user, admin_user):
    ticket_id = open_ticket(client, client_user).json()["id"]
    stranger = make_user(db, "stranger@example.com", [ROLE_CLIENT])

    assert client.patch(f"/api/tech-support/{ticket_id}", json={"status": "closed"}, headers=auth_headers(stranger)).status_code == 403
    assert client.patch(f"/api/tech-support/{ticket_id}", json={"status": "lost"}, headers=auth_headers(client_user)).status_code == 400
    assert client.patch("/api/tech-support/999", json={"status": "closed"}, headers=auth_headers(client_user)).status_code == 404


def test_my_tickets_and_admin_view(client, db, client_user, master_user, admin_user):
    open_ticket(client, client_user)
    open_ticket(client, master_user)

    assert len(client.get("/api/tech-support/me", headers=auth_headers(client_user)).json()) == 1
    assert len(client.get("/api/tech-support/me", headers=auth_headers(admin_user)).json()) == 2

    response = client.get(f"/api/tech-support/admin/{admin_user.id}", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert len(response.json()) == 2

    assert client.get(f"/api/tech-support/admin/{admin_user.id}", headers=auth_headers(client_user)).status_code == 403
    assert client.get("/api/tech-support/admin/999", headers=auth_headers(admin_user)).status_code == 404


def test_reasons(client, db):
    reasons = client.get("/api/tech-support/reasons").json()
    assert reasons[0] == {"id": 1, "support_code": "account", "support_human": "Account issues"}
    assert [r["support_code"] for r in reasons] == list(TechSupport.SUPPORT)


def test_message_thread(client, db, client_user, admin_user):
    ticket_id = open_ticket(client, client_user).json()["id"]

    response = client.post(
        "/api/tech-support-messages",
        json={"techSupport": f"/api/tech-support/{ticket_id}", "text": "Any news?"},
        headers=auth_headers(client_user),
    )
    assert response.status_code == 201
    message_id = response.json()["id"]

    reply = client.post(
        "/api/tech-support-messages",
        json={"techSupport": ticket_id, "text": "Looking into it"},
        headers=auth_headers(admin_user),
    )
    assert reply.status_code == 201

    detail = client.get(f"/api/tech-support/{ticket_id}", headers=auth_headers(client_user)).json()
    assert [m["text"] for m in detail["messages"]] == ["Any news?", "Looking into it"]

    assert client.patch(
        f"/api/tech-support-messages/{message_id}", json={"text": "Hello?"}, headers=auth_headers(admin_user)
    ).status_code == 403
    edited = client.patch(
        f"/api/tech-support-messages/{message_id}", json={"text": "Hello?"}, headers=auth_headers(client_user)
    )
    assert edited.json()["text"] == "Hello?"

    assert client.delete(f"/api/tech-support-messages/{message_id}", headers=auth_headers(admin_user)).status_code == 403
    assert client.delete(f"/api/tech-support-messages/{message_id}", headers=auth_headers(client_user)).status_code == 204


def test_message_rules(client, db, client_user):
    ticket_id = open_ticket(client, client_user).json()["id"]
    stranger = make_user(db, "stranger@example.com", [ROLE_CLIENT])

    assert client.post("/api/tech-support-messages", json={"techSupport": ticket_id}, headers=auth_headers(client_user)).status_code == 400
    assert client.post("/api/tech-support-messages", json={"text": "hi"}, headers=auth_headers(client_user)).status_code == 400
    assert client.post(
        "/api/tech-support-messages", json={"techSupport": ticket_id, "text": "hi"}, headers=auth_headers(stranger)
    ).status_code == 403
