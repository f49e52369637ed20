import pytest

PAGES = [
    ("/", "view_dashboard"),
    ("/catalog/", "view_catalog"),
    ("/categories/", "view_categories"),
    ("/products/", "view_products"),
    ("/stock/", "manage_stock"),
    ("/barcodes/", "view_barcodes"),
    ("/reports/", "view_reports"),
    ("/users/", "view_users"),
    ("/roles/", "view_roles"),
]


@pytest.fixture
def empty_backend(backend):
    backend.add("GET", "/catalogs", [])
    backend.add("GET", "/categories", [])
    backend.add("GET", "/products", {"products": [], "page": 1, "pages": 1})
    backend.add("GET", "/stock", {"transactions": [], "page": 1, "pages": 1})
    backend.add("GET", "/reports/inventory", {"products": [], "stats": {}})
    backend.add("GET", "/users", [])
    backend.add("GET", "/roles", [])
    return backend


@pytest.mark.parametrize("path,_permission", PAGES)
def test_anonymous_visitors_are_sent_to_login(client, path, _permission):
    response = client.get(path)

    assert response.status_code == 302
    assert "/auth/login" in response.headers["Location"]


@pytest.mark.parametrize("path,permission", PAGES)
def test_missing_permission_renders_access_denied(client, login, empty_backend, path, permission):
    login()

    response = client.get(path)

    assert response.status_code == 403
    assert b"Access denied" in response.data


@pytest.mark.parametrize("path,permission", PAGES)
def test_view_permission_opens_page(client, login, empty_backend, path, permission):
    login(permission)

    response = client.get(path)

    assert response.status_code == 200


def test_action_routes_need_their_own_tag(client, login, empty_backend):
    login("view_products")

    assert client.get("/products/new").status_code == 403
    assert client.get("/products/p1/edit").status_code == 403
    assert client.get("/products/p1/delete").status_code == 403


def test_access_denied_names_missing_capability(client, login, empty_backend):
    login("view_dashboard")

    response = client.get("/roles/")

    assert b"View Roles" in response.data


def test_navigation_shows_only_permitted_pages(client, login, empty_backend):
    login("view_dashboard", "view_products", "view_reports")

    response = client.get("/")
    body = response.get_data(as_text=True)

    assert 'href="/products/"' in body
    assert 'href="/reports/"' in body
    assert 'href="/users/"' not in body
    assert 'href="/roles/"' not in body
    assert 'href="/stock/"' not in body
    assert 'href="/catalog/"' not in body


def test_navigation_with_everything(client, login, empty_backend):
    login(*[permission for _, permission in PAGES])

    body = client.get("/").get_data(as_text=True)

    for path, _ in PAGES:
        assert f'href="{path}"' in body
