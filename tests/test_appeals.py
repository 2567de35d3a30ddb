"""
Appeals about tickets and chats
"""

from conftest import auth_headers, make_ticket, make_user

from app.models import ROLE_MASTER, Chat


def appeal_payload(**fields):
    payload = {
        "title": "No-show",
        "description": "The master never came",
        "complaintReason": "lateness",
        "type": "ticket",
    }
    payload.update(fields)
    return payload


def make_chat(db, author, reply_author):
    chat = Chat(author_id=author.id, reply_author_id=reply_author.id, active=True)
    db.add(chat)
    db.commit()
    db.refresh(chat)
    return chat


def test_ticket_appeal(client, db, client_user, master_user, category, unit):
    service = make_ticket(db, category, unit, master=master_user)

    response = client.post(
        "/api/appeals",
        json=appeal_payload(respondent=f"/api/users/{master_user.id}", ticket=f"/api/tickets/{service.id}"),
        headers=auth_headers(client_user),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["type"] == "ticket"
    assert body["complaintReason"] == "lateness"
    assert body["author"] == f"/api/users/{client_user.id}"
    assert body["respondent"] == f"/api/users/{master_user.id}"
    assert body["ticket"] == f"/api/tickets/{service.id}"
    assert body["chat"] is None


def test_ticket_respondent_must_own_ticket(client, db, client_user, master_user, category, unit):
    other = make_user(db, "other@example.com", [ROLE_MASTER])
    service = make_ticket(db, category, unit, master=other)

    response = client.post(
        "/api/appeals",
        json=appeal_payload(respondent=master_user.id, ticket=service.id),
        headers=auth_headers(client_user),
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Respondent's ticket doesn't match"


def test_chat_appeal(client, db, client_user, master_user):
    chat = make_chat(db, client_user, master_user)

    response = client.post(
        "/api/appeals",
        json=appeal_payload(type="chat", complaintReason="rude_language", respondent=master_user.id, chat=chat.id),
        headers=auth_headers(client_user),
    )

    assert response.status_code == 201
    assert response.json()["chat"] == f"/api/chats/{chat.id}"


def test_chat_appeal_rules(client, db, client_user, master_user):
    chat = make_chat(db, client_user, master_user)
    payload = appeal_payload(type="chat", complaintReason="fraud", chat=chat.id)

    # Only the chat author may complain
    response = client.post("/api/appeals", json={**payload, "respondent": client_user.id}, headers=auth_headers(master_user))
    assert response.status_code == 400
    assert response.json()["detail"] == "Ownership doesn't match"

    # The respondent must be the reply author
    response = client.post("/api/appeals", json={**payload, "respondent": client_user.id}, headers=auth_headers(client_user))
    assert response.status_code == 400
    assert response.json()["detail"] == "Respondent's chat doesn't match"


def test_appeal_validation(client, db, client_user, master_user):
    headers = auth_headers(client_user)

    response = client.post("/api/appeals", json={"type": "ticket", "title": "x"}, headers=headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"

    response = client.post("/api/appeals", json=appeal_payload(type="review", respondent=master_user.id), headers=headers)
    assert response.json()["detail"] == "Wrong type"

    # "offend" is a chat complaint, not a ticket one
    response = client.post(
        "/api/appeals", json=appeal_payload(complaintReason="offend", respondent=master_user.id), headers=headers
    )
    assert response.json()["detail"] == "Wrong complaint reason"

    response = client.post("/api/appeals", json=appeal_payload(respondent=master_user.id), headers=headers)
    assert response.json()["detail"] == "Missing ticket"

    response = client.post("/api/appeals", json=appeal_payload(respondent=999, ticket=1), headers=headers)
    assert response.status_code == 404


def test_appeals_are_admin_only(client, db, client_user, master_user, admin_user, category, unit):
    service = make_ticket(db, category, unit, master=master_user)
    appeal_id = client.post(
        "/api/appeals",
        json=appeal_payload(respondent=master_user.id, ticket=service.id),
        headers=auth_headers(client_user),
    ).json()["id"]

    assert client.get("/api/appeals", headers=auth_headers(client_user)).status_code == 403
    assert len(client.get("/api/appeals", headers=auth_headers(admin_user)).json()) == 1
    assert client.get("/api/appeals", params={"type": "chat"}, headers=auth_headers(admin_user)).json() == []
    assert client.get(f"/api/appeals/{appeal_id}", headers=auth_headers(admin_user)).json()["title"] == "No-show"
    assert client.get("/api/appeals/999", headers=auth_headers(admin_user)).status_code == 404


def test_complaint_reasons_are_unique(client, db):
    reasons = client.get("/api/appeals/reasons").json()
    codes = [r["complaint_code"] for r in reasons]

    assert len(codes) == len(set(codes))
    assert "offend" in codes
    assert "lateness" in codes
    assert [r["id"] for r in reasons] == list(range(1, len(reasons) + 1))
