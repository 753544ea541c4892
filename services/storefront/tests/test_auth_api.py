from app.core_settings import get_settings

def test_register_sets_session_and_me_returns_user(client):
    resp = client.post("/api/auth/register", json={"email": "  New@Example.com ", "password": "secret123", "name": "New"})

    assert resp.status_code == 201
    user = resp.json()["user"]
    assert user["email"] == "new@example.com"
    assert user["role"] == "customer"
    assert get_settings().session_cookie_name in resp.cookies

    me = client.get("/api/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user["id"]

def test_register_validation(client, make_user):
    make_user(email="taken@example.com")

    resp = client.post("/api/auth/register", json={"password": "secret123"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Email is required"

    resp = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Password must be at least 6 characters"

    resp = client.post("/api/auth/register", json={"email": "taken@example.com", "password": "secret123"})
    assert resp.status_code == 409
    assert resp.json() == {"ok": False, "error": "Email already registered"}

def test_login_and_logout(client, make_user):
    make_user(email="shopper@example.com", password="secret123")

    assert client.post("/api/auth/login", json={"email": "shopper@example.com"}).status_code == 400

    bad = client.post("/api/auth/login", json={"email": "shopper@example.com", "password": "wrong-pw"})
    assert bad.status_code == 401
    assert bad.json() == {"ok": False, "error": "Invalid credentials"}

    good = client.post("/api/auth/login", json={"email": "SHOPPER@example.com", "password": "secret123"})
    assert good.status_code == 200
    assert good.json()["user"]["email"] == "shopper@example.com"
    assert client.get("/api/me").status_code == 200

    assert client.post("/api/auth/logout").json() == {"ok": True}
    client.cookies.clear()
    assert client.get("/api/me").json() == {"ok": False, "user": None}

def test_bearer_token_is_accepted(client, make_user):
    from app.infrastructure.session import SessionClaims, encode_session

    user = make_user()
    token = encode_session(SessionClaims(user_id=user.id, role=user.role))
    resp = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == user.email

def test_register_race_on_same_email_is_a_conflict(client, make_user, monkeypatch):
    from app.application.auth_service import AuthService

    make_user(email="racer@example.com")
    # Both requests passed the lookup before either committed
    monkeypatch.setattr(AuthService, "find_by_email", lambda self, email: None)

    resp = client.post("/api/auth/register", json={"email": "racer@example.com", "password": "secret123"})

    assert resp.status_code == 409
    assert resp.json() == {"ok": False, "error": "Email already registered"}
