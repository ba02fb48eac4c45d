from conftest import register

from career_transition.services.auth import create_access_token, verify_access_token


def test_register_returns_token_and_user(client, db):
    payload = register(client, email="  Ada@Example.com ")

    assert payload["user"]["email"] == "ada@example.com"
    assert payload["user"]["name"] == "Ada"
    assert verify_access_token(payload["token"]) == {
        "id": payload["user"]["id"],
        "email": "ada@example.com",
    }


def test_register_validation(client, db):
    response = client.post("/api/auth/register", json={"email": "ada@example.com", "password": "password123"})
    assert response.status_code == 400
    assert response.json() == {"error": {"message": "name is required", "statusCode": 400}}

    response = client.post(
        "/api/auth/register",
        json={"email": "not-an-email", "name": "Ada", "password": "password123"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Invalid email format"

    response = client.post(
        "/api/auth/register",
        json={"email": "ada@example.com", "name": "Ada", "password": "short"},
    )
    assert response.status_code == 400
    assert "at least 8" in response.json()["error"]["message"]


def test_duplicate_email_is_rejected(client, db):
    register(client)

    response = client.post(
        "/api/auth/register",
        json={"email": "ada@example.com", "name": "Other", "password": "password123"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "User with this email already exists"


def test_login_and_me(client, db):
    register(client)

    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "password123"})
    assert response.status_code == 200
    token = response.json()["token"]

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "ada@example.com"
    assert response.json()["createdAt"]


def test_login_with_wrong_password(client, db):
    register(client)

    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json() == {"error": {"message": "Invalid email or password", "statusCode": 401}}


def test_login_is_rate_limited(client, db):
    register(client)
    for _ in range(8):
        client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong-pass"})

    response = client.post("/api/auth/login", json={"email": "ada@example.com", "password": "wrong-pass"})

    assert response.status_code == 429
    assert response.json()["error"]["message"] == "Rate limit exceeded"
    assert int(response.headers["Retry-After"]) >= 1


def test_protected_routes_need_a_valid_token(client, db):
    response = client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "No token provided"

    response = client.get("/api/plans", headers={"Authorization": "Bearer nope.nope"})
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Invalid or expired token"


def test_expired_token_is_rejected():
    token = create_access_token("00000000-0000-0000-0000-000000000001", "a@b.co", ttl_seconds=-1)
    assert verify_access_token(token) is None
