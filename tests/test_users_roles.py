USERS = [
    {"_id": "u1", "name": "Ada Lovelace", "email": "ada@example.com", "role": {"_id": "r1", "name": "Manager"}},
    {"_id": "u2", "name": "Grace Hopper", "email": "grace@example.com", "role": {"_id": "r2", "name": "Auditor"}},
    {"_id": "u3", "name": "Alan Turing", "email": "alan@example.com", "role": None},
]

ROLES = {
    "roles": [
        {"_id": "r1", "name": "Manager", "description": "Runs the floor", "permissions": ["view_products"]},
        {"_id": "r2", "name": "Auditor", "description": "", "permissions": []},
    ]
}


def test_user_search_matches_role_name(client, backend, login):
    login("view_users")
    backend.add("GET", "/users", USERS)

    body = client.get("/users/?search=auditor").get_data(as_text=True)

    assert "Grace Hopper" in body
    assert "Ada Lovelace" not in body
    assert "Alan Turing" not in body


def test_user_search_matches_email(client, backend, login):
    login("view_users")
    backend.add("GET", "/users", USERS)

    body = client.get("/users/?search=ALAN@").get_data(as_text=True)

    assert "Alan Turing" in body
    assert "Grace Hopper" not in body


def test_create_user_requires_password(client, backend, login):
    login("view_users", "create_user")
    backend.add("GET", "/roles", ROLES)

    response = client.post(
        "/users/new",
        data={"name": "New", "email": "new@example.com", "role": "r1", "password": ""},
    )

    assert b"Name, email, role and password are required." in response.data
    assert backend.last("POST", "/users") is None


def test_create_user_posts_payload(client, backend, login):
    login("view_users", "create_user")
    backend.add("GET", "/roles", ROLES)
    backend.add("POST", "/users", {"_id": "u9"}, status=201)

    response = client.post(
        "/users/new",
        data={"name": "New", "email": "new@example.com", "role": "r1", "password": "pw"},
    )

    assert response.status_code == 302
    assert backend.last("POST", "/users")["json"] == {
        "name": "New",
        "email": "new@example.com",
        "role": "r1",
        "password": "pw",
    }


def test_edit_user_omits_blank_password(client, backend, login):
    login("view_users", "edit_user")
    backend.add("GET", "/users/u2", USERS[1])
    backend.add("GET", "/roles", ROLES)
    backend.add("PUT", "/users/u2", {"_id": "u2"})

    form = client.get("/users/u2/edit").get_data(as_text=True)
    assert '<option value="r2" selected>' in form

    client.post(
        "/users/u2/edit",
        data={"name": "Grace", "email": "grace@example.com", "role": "r2", "password": ""},
    )

    assert "password" not in backend.last("PUT", "/users/u2")["json"]


def test_delete_user_error_fallback(client, backend, login):
    login("view_users", "delete_user")
    backend.add("DELETE", "/users/u2", None, status=500)
    backend.add("GET", "/users", USERS)

    response = client.post("/users/u2/delete", follow_redirects=True)

    assert b"Error deleting user" in response.data


def test_roles_search_is_server_side(client, backend, login):
    login("view_roles")
    backend.add("GET", "/roles", ROLES)

    client.get("/roles/?search=man")

    assert backend.last("GET", "/roles")["params"] == {"search": "man"}


def test_role_form_lists_every_permission(client, backend, login):
    login("view_roles", "create_role")

    body = client.get("/roles/new").get_data(as_text=True)

    assert body.count('name="permissions"') == 20
    assert "Select all" in body


def test_create_role_drops_unknown_and_duplicate_tags(client, backend, login):
    login("view_roles", "create_role")
    backend.add("POST", "/roles", {"_id": "r3"}, status=201)

    client.post(
        "/roles/new",
        data={
            "name": "Clerk",
            "description": "Front desk",
            "permissions": ["view_products", "view_products", "launch_rockets", "manage_stock"],
        },
    )

    assert backend.last("POST", "/roles")["json"] == {
        "name": "Clerk",
        "description": "Front desk",
        "permissions": ["view_products", "manage_stock"],
    }


def test_edit_role_prechecks_permissions(client, backend, login):
    login("view_roles", "edit_role")
    backend.add("GET", "/roles/r1", ROLES["roles"][0])

    body = client.get("/roles/r1/edit").get_data(as_text=True)

    assert 'value="view_products" class="permission-check" checked' in body


def test_edit_role_keeps_tags_without_checkbox(client, backend, login):
    login("view_roles", "edit_role")
    backend.add(
        "GET",
        "/roles/r9",
        {"_id": "r9", "name": "Admin", "permissions": ["manage_users", "view_products"]},
    )
    backend.add("PUT", "/roles/r9", {"_id": "r9"})

    form = client.get("/roles/r9/edit").get_data(as_text=True)
    assert "Also kept on this role: manage_users" in form

    client.post("/roles/r9/edit", data={"name": "Admin", "description": "", "permissions": ["view_products"]})

    assert backend.last("PUT", "/roles/r9")["json"]["permissions"] == ["view_products", "manage_users"]


def test_delete_role_warns_about_assigned_users(client, backend, login):
    login("view_roles", "delete_role")
    backend.add("GET", "/roles/r1", ROLES["roles"][0])

    body = client.get("/roles/r1/delete").get_data(as_text=True)

    assert "Users assigned to this role may lose access." in body
