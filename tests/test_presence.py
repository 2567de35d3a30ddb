"""
Online/offline presence and the stale-user sweep
"""

import asyncio
from datetime import timedelta

from conftest import auth_headers

from app import mercure
from app.models import User, utcnow
from app.services.presence_service import format_last_seen, mark_stale_users_offline
from app.worker import WorkerSettings, mark_users_offline_task


def test_ping_marks_user_online_and_publishes_once(client, db, published, client_user):
    headers = auth_headers(client_user)

    assert client.post("/api/users/ping", headers=headers).json() == {"ok": True}
    assert client.post("/api/users/ping", headers=headers).json() == {"ok": True}

    assert len(published) == 1
    update = published[0]
    assert update.topic_list == [f"user-status:{client_user.id}"]
    assert update.private is False
    assert update.data["type"] == "online"
    assert update.data["data"]["id"] == client_user.id
    assert update.data["data"]["isOnline"] is True

    db.expire_all()
    user = db.get(User, client_user.id)
    assert user.is_online is True
    assert user.last_seen is not None


def test_offline_publishes_transition(client, db, published, client_user):
    headers = auth_headers(client_user)
    client.post("/api/users/ping", headers=headers)

    response = client.post("/api/users/offline", headers=headers)

    assert response.status_code == 200
    assert [u.data["type"] for u in published] == ["online", "offline"]
    assert published[1].data["data"]["isOnline"] is False


def test_offline_when_already_offline_is_silent(client, db, published, client_user):
    response = client.post("/api/users/offline", headers=auth_headers(client_user))
    assert response.status_code == 200
    assert published == []


def test_user_response_exposes_presence(client, db, client_user):
    client.post("/api/users/ping", headers=auth_headers(client_user))

    body = client.get(f"/api/users/{client_user.id}").json()

    assert body["isOnline"] is True
    assert body["lastSeen"].endswith("+00:00")


def test_format_last_seen_drops_microseconds():
    user = User(last_seen=utcnow().replace(microsecond=123456))
    assert "." not in format_last_seen(user)
    assert format_last_seen(User()) is None


def test_mark_stale_users_offline(db, client_user, master_user):
    client_user.is_online = True
    client_user.last_seen = utcnow() - timedelta(minutes=30)
    master_user.is_online = True
    master_user.last_seen = utcnow()
    db.commit()

    count = mark_stale_users_offline(db, threshold_minutes=5)

    assert count == 1
    db.expire_all()
    assert db.get(User, client_user.id).is_online is False
    assert db.get(User, master_user.id).is_online is True
    updates = mercure.take_committed_updates(db)
    assert [u.topic_list for u in updates] == [[f"user-status:{client_user.id}"]]
    assert updates[0].data["type"] == "offline"


def test_mark_stale_users_offline_without_candidates(db, client_user):
    assert mark_stale_users_offline(db, threshold_minutes=5) == 0
    assert mercure.take_committed_updates(db) == []


def test_worker_sweep_job(db, published, client_user):
    """The cron job opens its own session and reports how many users it switched off"""
    client_user.is_online = True
    client_user.last_seen = utcnow() - timedelta(hours=2)
    db.commit()

    result = asyncio.run(mark_users_offline_task({"job_id": "test"}))

    assert result == {"marked_offline": 1}
    assert [u.data["type"] for u in published] == ["offline"]
    assert mark_users_offline_task in WorkerSettings.functions
    assert len(WorkerSettings.cron_jobs) == 1


def test_ping_status_reaches_hub_after_response(client, db, hub_requests, client_user):
    response = client.post("/api/users/ping", headers=auth_headers(client_user))

    assert response.status_code == 200
    assert len(hub_requests) == 1
    _, form, _ = hub_requests[0]
    assert form["topic"] == [f"user-status:{client_user.id}"]
    assert "private" not in form
