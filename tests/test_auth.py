from datetime import datetime, timedelta, timezone

SIGNUP = {
    "first_name": "Ann",
    "last_name": "Lee",
    "email": "Ann@Example.com",
    "password": "Secret-pass1",
}


# AUTH-001: register signs the new customer in
def test_register(client, fake):
    r = client.post("/api/auth/register", json=SIGNUP)

    assert r.status_code == 201
    assert r.json["success"] is True
    assert r.json["customer"]["email"] == "ann@example.com"
    assert r.json["access_token"] in fake.tokens

    # session cookie now carries the credential
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json["customer"]["first_name"] == "Ann"


# AUTH-002: email already taken
def test_register_taken(client, customer):
    r = client.post("/api/auth/register", json=dict(SIGNUP, email=customer[0]))
    assert r.status_code == 400
    assert "already registered" in r.json["error"]


# AUTH-003: input validation
def test_register_validation(client):
    r = client.post("/api/auth/register", json=dict(SIGNUP, password="short"))
    assert r.status_code == 400

    r = client.post("/api/auth/register", json=dict(SIGNUP, email="not-an-email"))
    assert r.status_code == 400

    r = client.post("/api/auth/register", json=dict(SIGNUP, first_name="  "))
    assert r.status_code == 400
    assert r.json["missing"] == ["first_name"]


# AUTH-004: login
def test_login(client, customer):
    email, password = customer
    r = client.post("/api/auth/login", json={"email": email, "password": password})

    assert r.status_code == 200
    assert r.json["access_token"].startswith("customer-token-")
    assert r.json["customer"]["email"] == email
    assert datetime.fromisoformat(r.json["expires_at"]) > datetime.now(timezone.utc)


# AUTH-005: wrong password
def test_login_bad_credentials(client, customer):
    r = client.post("/api/auth/login", json={"email": customer[0], "password": "wrong-password"})
    assert r.status_code == 401
    assert r.json["code"] == "unauthorized"
    assert r.json["error"] == "Invalid email or password"


def test_me_with_header(app, customer, auth_headers):
    # fresh client: only the header identifies the customer
    with app.test_client() as other:
        r = other.get("/api/auth/me", headers=auth_headers)
    assert r.status_code == 200
    assert r.json["customer"]["email"] == customer[0]


def test_me_without_credentials(client):
    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json["code"] == "unauthorized"


def test_expired_header_is_rejected_locally(client, auth_headers):
    past = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    r = client.get("/api/auth/me", headers=dict(auth_headers, **{"X-Access-Token-Expires-At": past}))
    assert r.status_code == 401
    assert r.json["code"] == "token_expired"


def test_expired_stored_session_is_dropped(client):
    with client.session_transaction() as sess:
        sess["auth"] = {"token": "customer-token-9", "expires_at": "2000-01-01T00:00:00Z", "customer": {}}

    r = client.get("/api/auth/me")
    assert r.status_code == 401
    assert r.json["code"] == "token_expired"

    with client.session_transaction() as sess:
        assert "auth" not in sess


def test_token_rejected_by_platform(client):
    r = client.get("/api/auth/me", headers={"X-Access-Token": "revoked"})
    assert r.status_code == 401


# AUTH-006: logout revokes the token
def test_logout(client, fake, auth_headers):
    token = auth_headers["X-Access-Token"]

    r = client.post("/api/auth/logout", headers=auth_headers)

    assert r.status_code == 200
    assert fake.deleted_tokens == [token]
    assert client.get("/api/auth/me").status_code == 401


def test_logout_without_credentials(client):
    assert client.post("/api/auth/logout").status_code == 401
