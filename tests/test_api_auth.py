"""Tests for account endpoints."""

from fastapi.testclient import TestClient

from smartcal.api.app import create_app


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_signup_login_verify_flow(container) -> None:
    client = TestClient(create_app(container))

    signup = client.post(
        "/api/auth/signup",
        json={
            "username": "alice",
            "email": "alice@example.com",
            "password": "pw",
            "dailyCalorieTarget": 1800,
        },
    )
    assert signup.status_code == 201
    assert signup.json()["user"]["dailyCalorieTarget"] == 1800

    login = client.post(
        "/api/auth/login", json={"username": "alice@example.com", "password": "pw"}
    )
    assert login.status_code == 200
    token = login.json()["token"]

    verify = client.get(
        "/api/auth/verify", headers={"Authorization": f"Bearer {token}"}
    )
    assert verify.status_code == 200
    user = verify.json()["user"]
    assert user["username"] == "alice"
    assert user["role"] == "USER"
    assert "password" not in str(user)


def test_signup_conflict_and_bad_login(container) -> None:
    client = TestClient(create_app(container))
    body = {"username": "alice", "email": "alice@example.com", "password": "pw"}
    client.post("/api/auth/signup", json=body)

    duplicate = client.post("/api/auth/signup", json=body)
    bad_login = client.post(
        "/api/auth/login", json={"username": "alice", "password": "nope"}
    )

    assert duplicate.status_code == 409
    assert duplicate.json() == {"error": "Username or email already exists"}
    assert bad_login.status_code == 401
    assert bad_login.json() == {"error": "Invalid credentials"}


def test_verify_requires_token(container) -> None:
    client = TestClient(create_app(container))

    missing = client.get("/api/auth/verify")
    garbage = client.get("/api/auth/verify", headers={"Authorization": "Bearer xyz"})

    assert missing.status_code == 401
    assert missing.json() == {"error": "Token required"}
    assert garbage.status_code == 401


def test_update_profile(container, auth_headers) -> None:
    client = TestClient(create_app(container))
    _, headers = auth_headers("alice")

    response = client.put(
        "/api/auth/profile", json={"dailyCalorieTarget": 2200}, headers=headers
    )
    empty = client.put("/api/auth/profile", json={}, headers=headers)
    out_of_range = client.put(
        "/api/auth/profile", json={"dailyCalorieTarget": 9000}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["user"]["dailyCalorieTarget"] == 2200
    assert empty.status_code == 400
    assert out_of_range.status_code == 400
