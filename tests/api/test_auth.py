from helpers import PASSWORD


def test_login_sets_session_cookie(client):
    response = client.post(
        "/auth/login",
        data={"email": "ada@example.com", "password": PASSWORD},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    assert "session_id" in response.cookies

    status = client.get("/auth/status").json()
    assert status["authenticated"] is True
    assert status["email"] == "ada@example.com"
    assert status["user_id"] == "user-1"


def test_login_with_bad_password(client):
    response = client.post(
        "/auth/login",
        data={"email": "ada@example.com", "password": "wrong"},
        follow_redirects=False,
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid login credentials"
    assert client.get("/auth/status").json() == {"authenticated": False}


def test_register_redirects_to_login(client, fake_store):
    response = client.post(
        "/auth/register",
        data={"email": "new@example.com", "password": PASSWORD},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/?registered=1"
    assert fake_store.registered == ["new@example.com"]


def test_register_twice_fails(client):
    data = {"email": "new@example.com", "password": PASSWORD}
    client.post("/auth/register", data=data, follow_redirects=False)

    response = client.post("/auth/register", data=data, follow_redirects=False)

    assert response.status_code == 400


def test_logout_clears_session(logged_in_client, fake_store):
    response = logged_in_client.post("/auth/logout", follow_redirects=False)

    assert response.status_code == 303
    assert fake_store.user is None
    assert logged_in_client.get("/auth/status").json() == {"authenticated": False}


def test_dashboard_requires_login(client):
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_index_redirects_signed_in_user(logged_in_client):
    response = logged_in_client.get("/", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
