"""Permission tags granted through roles and the pages they unlock."""

from __future__ import annotations

from typing import NamedTuple

from flask import abort, render_template
from flask_login import current_user

from factoryadmin.extensions import login_manager
from factoryadmin.session import has_permission


# Ordered the way the role editor groups them.
AVAILABLE_PERMISSIONS: tuple[tuple[str, str], ...] = (
    ("view_dashboard", "View Dashboard"),
    ("view_users", "View Users"),
    ("create_user", "Create User"),
    ("edit_user", "Edit User"),
    ("delete_user", "Delete User"),
    ("view_roles", "View Roles"),
    ("create_role", "Create Role"),
    ("edit_role", "Edit Role"),
    ("delete_role", "Delete Role"),
    ("view_products", "View Products"),
    ("create_product", "Create Product"),
    ("edit_product", "Edit Product"),
    ("delete_product", "Delete Product"),
    ("manage_stock", "Manage Stock"),
    ("view_reports", "View Reports"),
    ("view_catalog", "View Catalog"),
    ("manage_catalog", "Manage Catalog"),
    ("view_categories", "View Categories"),
    ("manage_categories", "Manage Categories"),
    ("view_barcodes", "View Barcodes"),
)

PERMISSION_LABELS: dict[str, str] = dict(AVAILABLE_PERMISSIONS)


class NavigationPage(NamedTuple):
    label: str
    endpoint: str
    permission: str


NAVIGATION_PAGES: tuple[NavigationPage, ...] = (
    NavigationPage("Dashboard", "dashboard.home", "view_dashboard"),
    NavigationPage("Catalog", "catalog.list_catalogs", "view_catalog"),
    NavigationPage("Categories", "categories.list_categories", "view_categories"),
    NavigationPage("Products", "products.list_products", "view_products"),
    NavigationPage("Stock", "stock.list_transactions", "manage_stock"),
    NavigationPage("Barcodes", "barcodes.select_products", "view_barcodes"),
    NavigationPage("Reports", "reports.stock_report", "view_reports"),
    NavigationPage("Users", "users.list_users", "view_users"),
    NavigationPage("Roles", "roles.list_roles", "view_roles"),
)


def permission_label(permission: str) -> str:
    return PERMISSION_LABELS.get(permission, permission.replace("_", " ").title())


def visible_pages() -> list[NavigationPage]:
    """Pages the current identity may open, in sidebar order."""

    return [page for page in NAVIGATION_PAGES if has_permission(page.permission)]


def access_denied_response(permission: str):
    return (
        render_template(
            "errors/access_denied.html",
            permission=permission,
            permission_label=permission_label(permission),
        ),
        403,
    )


def ensure_permission(permission: str):
    """Return a response when the visitor may not proceed, else ``None``."""

    if not current_user.is_authenticated:
        return login_manager.unauthorized()
    if has_permission(permission):
        return None
    abort(403, description=permission)
