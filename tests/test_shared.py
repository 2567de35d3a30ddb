"""
IRI helpers, validators, role checks, rate limiting and e-mail rendering
"""

import asyncio

import pytest
from conftest import make_user
from fastapi import HTTPException

from app import rate_limiter
from app.access import check_access, check_blacklist
from app.email_service import EmailServiceError, send_email
from app.email_templates import account_confirmation_link, account_confirmation_template
from app.models import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER, BlackList, Category, User
from app.shared.iri import extract_entity, extract_id, iri
from app.shared.validators import validate_email, validate_phone

# ============================================================================
# IRI
# ============================================================================


def test_iri():
    assert iri("users", 5) == "/api/users/5"
    assert iri("users", None) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("/api/users/12", 12),
        ("12", 12),
        (12, 12),
        (" 7 ", 7),
        ("/api/tickets/3", None),
        ("abc", None),
        (None, None),
        (True, None),
        ("/api/users/99999999999999999999999", None),
        (2**63, None),
        (2**63 - 1, 2**63 - 1),
        (-3, None),
    ],
)
def test_extract_id(value, expected):
    assert extract_id(value, "users") == expected


def test_extract_entity(db, category):
    assert extract_entity(db, f"/api/categories/{category.id}", Category, "categories").id == category.id

    with pytest.raises(HTTPException) as exc:
        extract_entity(db, "/api/categories/999", Category, "categories")
    assert exc.value.status_code == 404


# ============================================================================
# VALIDATORS
# ============================================================================


def test_validate_phone():
    assert validate_phone("+992 90 123 45 67") == "+992901234567"
    assert validate_phone("901234567") == "+992901234567"
    assert validate_phone("+14155552671") == "+14155552671"
    assert validate_phone(None) is None

    with pytest.raises(ValueError):
        validate_phone("+99290123")
    with pytest.raises(ValueError):
        validate_phone("12345")


def test_validate_email():
    assert validate_email(" Someone@Example.COM ") == "someone@example.com"
    with pytest.raises(ValueError):
        validate_email("someone@")


# ============================================================================
# ACCESS
# ============================================================================


def test_check_access_grades(db):
    admin = make_user(db, "admin@example.com", [ROLE_ADMIN])
    client = make_user(db, "client@example.com", [ROLE_CLIENT])

    assert check_access(admin)
    assert check_access(client, "double")
    assert check_access(admin, "admin")

    with pytest.raises(HTTPException) as exc:
        check_access(admin, "double")
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        check_access(client, "nonsense")
    assert exc.value.detail == "Role not allowed"

    with pytest.raises(HTTPException) as exc:
        check_access(None)
    assert exc.value.status_code == 401


def test_check_access_state(db):
    unapproved = make_user(db, "new@example.com", [ROLE_CLIENT], approved=False)

    with pytest.raises(HTTPException) as exc:
        check_access(unapproved)
    assert "not approved" in exc.value.detail

    assert check_access(unapproved, active_and_approved=False)


def test_check_blacklist(db):
    client = make_user(db, "client@example.com", [ROLE_CLIENT])
    master = make_user(db, "master@example.com", [ROLE_MASTER])
    db.add(BlackList(author_id=client.id, masters=[master]))
    db.commit()
    db.expire_all()

    client = db.get(User, client.id)
    master = db.get(User, master.id)

    with pytest.raises(HTTPException) as exc:
        check_blacklist(client, assumed_user=master)
    assert exc.value.detail == "You blacklisted this user"

    with pytest.raises(HTTPException) as exc:
        check_blacklist(master, assumed_user=client)
    assert exc.value.detail == "You are blacklisted by this user"


# ============================================================================
# RATE LIMITING
# ============================================================================


def test_check_rate_limit_in_memory(monkeypatch):
    monkeypatch.setattr(rate_limiter, "memory_cache", {})

    results = [rate_limiter.check_rate_limit("login:1.2.3.4", 2, 60, None) for _ in range(3)]

    assert [allowed for allowed, _, _ in results] == [True, True, False]
    assert results[-1][1] == 2
    assert 0 < results[-1][2] <= 60


def test_rate_limit_windows_are_per_key(monkeypatch):
    monkeypatch.setattr(rate_limiter, "memory_cache", {})

    rate_limiter.check_rate_limit("login:a", 1, 60, None)
    allowed, count, _ = rate_limiter.check_rate_limit("login:b", 1, 60, None)

    assert allowed is True
    assert count == 1


# ============================================================================
# E-MAIL
# ============================================================================


def test_confirmation_template_contains_link():
    mjml = account_confirmation_template("Nina", "abc123", 24)

    assert account_confirmation_link("abc123") in mjml
    assert "Hi Nina," in mjml
    assert "24 hours" in mjml
    assert mjml.strip().startswith("<mjml>")


def test_send_email_without_api_key():
    with pytest.raises(EmailServiceError):
        asyncio.run(send_email("someone@example.com", "Subject", "<mjml></mjml>"))
