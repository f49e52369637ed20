from conftest import identity_payload


def test_login_page_renders(client):
    response = client.get("/auth/login")

    assert response.status_code == 200
    assert b"Sign in" in response.data


def test_login_redirects_to_dashboard(client, backend, login):
    backend.add("GET", "/products", [])
    backend.add("GET", "/categories", [])

    response = login("view_dashboard")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")
    assert backend.last("POST", "/users/login")["json"] == {
        "email": "ada@example.com",
        "password": "pw",
    }

    dashboard = client.get("/")
    assert dashboard.status_code == 200
    assert b"Welcome, Ada Lovelace" in dashboard.data


def test_login_failure_shows_server_message(client, backend):
    backend.add("POST", "/users/login", {"message": "Invalid credentials"}, status=401)

    response = client.post("/auth/login", data={"email": "ada@example.com", "password": "bad"})

    assert response.status_code == 200
    assert b"Invalid credentials" in response.data
    with client.session_transaction() as session:
        assert "user" not in session


def test_login_failure_without_message_uses_generic_text(client, backend):
    backend.add("POST", "/users/login", None, status=500)

    response = client.post("/auth/login", data={"email": "ada@example.com", "password": "bad"})

    assert b"Login failed" in response.data


def test_login_follows_next_for_local_paths(client, backend):
    backend.add("POST", "/users/login", identity_payload(["view_reports"]))

    response = client.post(
        "/auth/login?next=/reports/",
        data={"email": "ada@example.com", "password": "pw"},
    )

    assert response.headers["Location"].endswith("/reports/")


def test_login_ignores_external_next(client, backend):
    backend.add("POST", "/users/login", identity_payload(["view_reports"]))

    response = client.post(
        "/auth/login?next=https://evil.example/",
        data={"email": "ada@example.com", "password": "pw"},
    )

    assert "evil.example" not in response.headers["Location"]


def test_identity_persisted_under_user_key(client, login):
    login("view_dashboard")

    with client.session_transaction() as session:
        assert "secret-token" in session["user"]


def test_token_sent_with_backend_calls(client, backend, login):
    login("view_catalog")
    backend.add("GET", "/catalogs", [])

    client.get("/catalog/")

    assert backend.last("GET", "/catalogs")["headers"] == {"Authorization": "Bearer secret-token"}


def test_logout_clears_session_and_returns_to_login(client, login):
    login("view_dashboard")

    response = client.post("/auth/logout")

    assert response.status_code == 302
    assert "/auth/login" in response.headers["Location"]
    with client.session_transaction() as session:
        assert "user" not in session

    protected = client.get("/catalog/")
    assert protected.status_code == 302
    assert "/auth/login" in protected.headers["Location"]


def test_profile_password_mismatch_sends_nothing(client, backend, login):
    login()

    response = client.post(
        "/auth/profile",
        data={
            "name": "Ada",
            "email": "ada@example.com",
            "password": "one",
            "confirm_password": "two",
        },
    )

    assert response.status_code == 200
    assert b"Passwords do not match" in response.data
    assert backend.last("PUT", "/users/profile") is None


def test_profile_update_replaces_stored_identity(client, backend, login):
    login("view_dashboard")
    backend.add(
        "PUT",
        "/users/profile",
        {"_id": "u1", "name": "Ada King", "email": "ada@king.example"},
    )

    response = client.post(
        "/auth/profile",
        data={"name": "Ada King", "email": "ada@king.example", "password": "", "confirm_password": ""},
    )

    assert response.status_code == 302
    assert backend.last("PUT", "/users/profile")["json"] == {
        "name": "Ada King",
        "email": "ada@king.example",
    }
    with client.session_transaction() as session:
        stored = session["user"]
    assert "Ada King" in stored
    assert "secret-token" in stored
    assert "view_dashboard" in stored


def test_profile_sends_password_only_when_given(client, backend, login):
    login()
    backend.add("PUT", "/users/profile", {"_id": "u1", "name": "Ada", "email": "ada@example.com"})

    client.post(
        "/auth/profile",
        data={"name": "Ada", "email": "ada@example.com", "password": "n3w", "confirm_password": "n3w"},
    )

    assert backend.last("PUT", "/users/profile")["json"]["password"] == "n3w"


def test_unauthorized_backend_response_is_only_logged_by_default(client, backend, login):
    login("view_catalog")
    backend.add("GET", "/catalogs", {"message": "Token expired"}, status=401)

    response = client.get("/catalog/")

    assert response.status_code == 200
    assert b"Token expired" in response.data
    with client.session_transaction() as session:
        assert "user" in session


def test_unauthorized_backend_response_can_sign_out(app, client, backend, login):
    app.config["LOGOUT_ON_UNAUTHORIZED"] = True
    login("view_catalog")
    backend.add("GET", "/catalogs", {"message": "Token expired"}, status=401)

    client.get("/catalog/")

    with client.session_transaction() as session:
        assert "user" not in session


def test_logout_rejects_get(client, login):
    login("view_dashboard")

    response = client.get("/auth/logout")

    assert response.status_code == 405
    with client.session_transaction() as session:
        assert "user" in session
