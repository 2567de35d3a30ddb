"""
Registration, account confirmation, login, profiles and roles
"""

from conftest import PASSWORD, auth_headers, make_user

from app.models import ROLE_CLIENT, ROLE_MASTER, AccountConfirmationToken, User


def test_register_creates_inactive_account(client, db, sent_emails):
    """A new account waits for e-mail confirmation"""
    response = client.post(
        "/api/users",
        json={"email": "New@Example.com", "password": PASSWORD, "name": "Nina", "role": "client"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "new@example.com"
    assert body["active"] is False
    assert body["approved"] is False
    assert ROLE_CLIENT in body["roles"]
    assert "password" not in body

    assert len(sent_emails) == 1
    to, user_name, token = sent_emails[0]
    assert to == "new@example.com"
    assert user_name == "Nina"
    assert len(token) == 64


def test_register_hashes_password(client, db, sent_emails):
    client.post("/api/users", json={"email": "hash@example.com", "password": PASSWORD})

    user = db.query(User).filter(User.email == "hash@example.com").one()
    assert user.password != PASSWORD
    assert user.password.startswith("$2")


def test_register_duplicate_email(client, db, sent_emails, client_user):
    response = client.post("/api/users", json={"email": "client@example.com", "password": PASSWORD})
    assert response.status_code == 409


def test_register_rejects_invalid_input(client, db, sent_emails):
    assert client.post("/api/users", json={"email": "nope", "password": PASSWORD}).status_code == 422
    assert client.post("/api/users", json={"email": "a@b.com", "password": "123"}).status_code == 422
    assert (
        client.post("/api/users", json={"email": "a@b.com", "password": PASSWORD, "role": "admin"}).status_code
        == 422
    )


def test_register_normalizes_local_phone(client, db, sent_emails):
    response = client.post(
        "/api/users", json={"email": "phone@example.com", "password": PASSWORD, "phone1": "900 123 456"}
    )
    assert response.status_code == 201
    assert response.json()["phone1"] == "+992900123456"


def test_confirm_account_activates_user(client, db, sent_emails):
    client.post("/api/users", json={"email": "confirm@example.com", "password": PASSWORD, "role": "master"})
    token = sent_emails[0][2]

    response = client.post("/api/confirm-account", json={"token": token})

    assert response.status_code == 200
    assert response.json()["success"] is True

    db.expire_all()
    user = db.query(User).filter(User.email == "confirm@example.com").one()
    assert user.active is True
    assert user.approved is True
    assert db.query(AccountConfirmationToken).count() == 0


def test_confirm_account_rejects_unknown_token(client, db):
    response = client.post("/api/confirm-account", json={"token": "deadbeef"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Token is invalid or expired"

    assert client.post("/api/confirm-account", json={}).status_code == 400


def test_login(client, db, client_user):
    response = client.post("/api/authentication_token", json={"email": "client@example.com", "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["token"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == client_user.id


def test_login_wrong_password(client, db, client_user):
    response = client.post("/api/authentication_token", json={"email": "client@example.com", "password": "wrong!"})
    assert response.status_code == 401


def test_inactive_user_is_refused(client, db):
    user = make_user(db, "sleepy@example.com", [ROLE_CLIENT], active=False)
    response = client.get("/api/users/me", headers=auth_headers(user))
    assert response.status_code == 403
    assert "not active" in response.json()["detail"]


def test_inactive_user_can_still_edit_profile(client, db):
    user = make_user(db, "draft@example.com", [ROLE_CLIENT], active=False)
    response = client.patch("/api/users/me", json={"bio": "Hello"}, headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json()["bio"] == "Hello"


def test_update_me_ignores_unset_fields(client, db, client_user):
    response = client.patch(
        "/api/users/me", json={"surname": "Smith", "gender": "gender_female"}, headers=auth_headers(client_user)
    )
    assert response.status_code == 200
    body = response.json()
    assert body["surname"] == "Smith"
    assert body["name"] == "Carol"


def test_update_me_rejects_unknown_gender(client, db, client_user):
    response = client.patch("/api/users/me", json={"gender": "robot"}, headers=auth_headers(client_user))
    assert response.status_code == 422


def test_masters_and_clients_lists(client, db, client_user, master_user):
    make_user(db, "hidden@example.com", [ROLE_MASTER], active=False)

    masters = client.get("/api/users/masters").json()
    clients = client.get("/api/users/clients").json()

    assert [m["id"] for m in masters] == [master_user.id]
    assert [c["id"] for c in clients] == [client_user.id]


def test_get_master_by_id_checks_role(client, db, client_user, master_user):
    headers = auth_headers(client_user)
    assert client.get(f"/api/users/masters/{master_user.id}", headers=headers).status_code == 200
    assert client.get(f"/api/users/masters/{client_user.id}", headers=headers).status_code == 404


def test_get_user_not_found(client, db):
    assert client.get("/api/users/999").status_code == 404


def test_grant_role_to_account_without_role(client, db, sent_emails):
    user = make_user(db, "plain@example.com", [])

    response = client.post("/api/users/grant-role", json={"role": "master"}, headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json()["message"] == "Granted master role"
    assert len(sent_emails) == 1

    db.expire_all()
    assert db.get(User, user.id).roles == [ROLE_MASTER]


def test_grant_role_refused_for_existing_role(client, db, sent_emails, client_user):
    response = client.post("/api/users/grant-role", json={"role": "master"}, headers=auth_headers(client_user))
    assert response.status_code == 403
    assert response.json()["detail"] == "You're client"


def test_grant_role_wrong_role(client, db, sent_emails):
    user = make_user(db, "plain@example.com", [])
    response = client.post("/api/users/grant-role", json={"role": "wizard"}, headers=auth_headers(user))
    assert response.status_code == 404
