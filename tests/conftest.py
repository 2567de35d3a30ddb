"""
Pytest configuration: in-memory SQLite, Mercure and e-mail captured in lists
"""

import os

# Must be set before the app modules read their configuration
os.environ["SECRET_KEY"] = "test-secret-key-minimum-32-characters-long-for-security"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["MERCURE_ENABLED"] = "false"
os.environ["BACKGROUND_JOBS_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.pop("RESEND_API_KEY", None)

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app import mercure  # noqa: E402
from app.database import Base, SessionLocal, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.models import ROLE_ADMIN, ROLE_CLIENT, ROLE_MASTER, Category, Ticket, Unit, User  # noqa: E402
from app.security_utils import create_access_token  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture
def db():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def published(monkeypatch):
    """Mercure updates sent during the test"""
    updates = []

    async def fake_publish(update):
        updates.append(update)
        return f"urn:uuid:test-{len(updates)}"

    monkeypatch.setattr(mercure.hub, "publish", fake_publish)
    return updates


@pytest.fixture
def hub_requests(monkeypatch):
    """Enabled hub whose HTTP requests are recorded as (url, form, headers)"""
    requests = []

    class RecordingAsyncClient:
        def __init__(self, **kwargs):
            self.kwargs = kwargs

        async def __aenter__(self):
            return self

        async def __aexit__(self, *exc_info):
            return False

        async def post(self, url, data=None, headers=None):
            requests.append((url, data, headers))
            return httpx.Response(200, text=f"urn:uuid:{len(requests)}")

    def blocking_post(*args, **kwargs):
        raise AssertionError("hub must be called through httpx.AsyncClient")

    monkeypatch.setattr(httpx, "AsyncClient", RecordingAsyncClient)
    monkeypatch.setattr(httpx, "post", blocking_post)
    monkeypatch.setattr(mercure.hub, "enabled", True)
    return requests


@pytest.fixture
def sent_emails(monkeypatch):
    """Confirmation e-mails sent during the test, as (to, user_name, token)"""
    emails = []

    async def fake_send(to, user_name, token):
        emails.append((to, user_name, token))

    monkeypatch.setattr("app.services.account_confirmation.send_account_confirmation_email", fake_send)
    return emails


def make_user(db, email, roles, active=True, approved=True, **fields):
    user = User(
        email=email,
        password=PASSWORD,
        roles=list(roles),
        active=active,
        approved=approved,
        **fields,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(user.id, user.email, user.get_roles())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client_user(db):
    return make_user(db, "client@example.com", [ROLE_CLIENT], name="Carol")


@pytest.fixture
def master_user(db):
    return make_user(db, "master@example.com", [ROLE_MASTER], name="Max")


@pytest.fixture
def admin_user(db):
    return make_user(db, "admin@example.com", [ROLE_ADMIN], name="Ada")


@pytest.fixture
def category(db):
    category = Category(title="Plumbing", description="Pipes and taps")
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@pytest.fixture
def unit(db):
    unit = Unit(title="hour")
    db.add(unit)
    db.commit()
    db.refresh(unit)
    return unit


def make_ticket(db, category, unit, author=None, master=None, **fields):
    """A client's request when `author` is given, a master's service when `master` is"""
    ticket = Ticket(
        title=fields.pop("title", "Fix the sink"),
        description=fields.pop("description", "Kitchen sink is leaking"),
        category_id=category.id,
        unit_id=unit.id,
        author_id=author.id if author else None,
        master_id=master.id if master else None,
        service=master is not None and author is None,
        active=fields.pop("active", True),
        **fields,
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    return ticket
