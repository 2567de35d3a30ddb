"""
Service-level endpoints and middleware
"""


def test_health_check(client):
    """/health answers without authentication"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["message"]


def test_security_headers_on_api_responses(client):
    response = client.get("/api/categories")
    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "no-store" in response.headers["Cache-Control"]


def test_health_is_excluded_from_security_headers(client):
    response = client.get("/health")
    assert "X-Frame-Options" not in response.headers


def test_missing_token_is_rejected(client):
    """HTTPBearer refuses requests without an Authorization header"""
    response = client.get("/api/users/me")
    assert response.status_code in (401, 403)


def test_invalid_token_is_rejected(client):
    response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
