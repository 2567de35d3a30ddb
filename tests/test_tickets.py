"""
Client requests and master services
"""

from conftest import auth_headers, make_ticket, make_user

from app.models import ROLE_MASTER


def ticket_payload(category, unit, **overrides):
    payload = {
        "title": "Fix the sink",
        "description": "Kitchen sink is leaking",
        "budget": 150,
        "category": f"/api/categories/{category.id}",
        "unit": f"/api/units/{unit.id}",
    }
    payload.update(overrides)
    return payload


def test_client_posts_request(client, db, client_user, category, unit):
    response = client.post("/api/tickets", json=ticket_payload(category, unit), headers=auth_headers(client_user))

    assert response.status_code == 201
    body = response.json()
    assert body["service"] is False
    assert body["active"] is True
    assert body["author"] == f"/api/users/{client_user.id}"
    assert body["master"] is None
    assert body["category"] == f"/api/categories/{category.id}"


def test_master_posts_service(client, db, master_user, category, unit):
    response = client.post(
        "/api/tickets", json=ticket_payload(category, unit, active=False), headers=auth_headers(master_user)
    )

    assert response.status_code == 201
    body = response.json()
    assert body["service"] is True
    assert body["active"] is False
    assert body["master"] == f"/api/users/{master_user.id}"
    assert body["author"] is None


def test_missing_required_fields(client, db, client_user, category, unit):
    payload = ticket_payload(category, unit)
    del payload["unit"]
    response = client.post("/api/tickets", json=payload, headers=auth_headers(client_user))
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields"


def test_unknown_category(client, db, client_user, category, unit):
    payload = ticket_payload(category, unit)
    payload["category"] = "/api/categories/999"

    response = client.post("/api/tickets", json=payload, headers=auth_headers(client_user))

    assert response.status_code == 404
    assert response.json()["detail"] == "Category #999 not found"


def test_negative_budget(client, db, client_user, category, unit):
    response = client.post(
        "/api/tickets", json=ticket_payload(category, unit, budget=-1), headers=auth_headers(client_user)
    )
    assert response.status_code == 422


def test_admin_cannot_post_ticket(client, db, admin_user, category, unit):
    response = client.post("/api/tickets", json=ticket_payload(category, unit), headers=auth_headers(admin_user))
    assert response.status_code == 403


def test_list_filters(client, db, client_user, master_user, category, unit):
    request = make_ticket(db, category, unit, author=client_user)
    service = make_ticket(db, category, unit, master=master_user)
    make_ticket(db, category, unit, master=master_user, active=False)

    services = client.get("/api/tickets", params={"service": "true", "active": "true"}).json()
    requests = client.get("/api/tickets", params={"service": "false"}).json()
    by_category = client.get("/api/tickets", params={"category": f"/api/categories/{category.id}"}).json()

    assert [t["id"] for t in services] == [service.id]
    assert [t["id"] for t in requests] == [request.id]
    assert len(by_category) == 3


def test_list_rejects_malformed_category(client, db):
    assert client.get("/api/tickets", params={"category": "plumbing"}).status_code == 400


def test_my_tickets(client, db, client_user, master_user, category, unit):
    mine = make_ticket(db, category, unit, author=client_user)
    make_ticket(db, category, unit, master=master_user)

    tickets = client.get("/api/tickets/me", headers=auth_headers(client_user)).json()

    assert [t["id"] for t in tickets] == [mine.id]


def test_get_ticket(client, db, client_user, category, unit):
    ticket = make_ticket(db, category, unit, author=client_user)
    assert client.get(f"/api/tickets/{ticket.id}").json()["title"] == "Fix the sink"
    assert client.get("/api/tickets/999").status_code == 404


def test_owner_updates_ticket(client, db, master_user, category, unit):
    ticket = make_ticket(db, category, unit, master=master_user)

    response = client.patch(
        f"/api/tickets/{ticket.id}", json={"title": "Pipe repair", "negotiableBudget": True},
        headers=auth_headers(master_user),
    )

    assert response.status_code == 200
    assert response.json()["title"] == "Pipe repair"
    assert response.json()["negotiableBudget"] is True
    assert response.json()["description"] == "Kitchen sink is leaking"


def test_stranger_cannot_update_ticket(client, db, master_user, category, unit):
    ticket = make_ticket(db, category, unit, master=master_user)
    other = make_user(db, "other@example.com", [ROLE_MASTER])

    response = client.patch(f"/api/tickets/{ticket.id}", json={"title": "Mine now"}, headers=auth_headers(other))

    assert response.status_code == 403
