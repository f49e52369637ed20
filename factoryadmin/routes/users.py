from __future__ import annotations

from typing import Optional

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from factoryadmin.auth import blueprint_permission_guard, permission_required
from factoryadmin.models import UserAccount
from factoryadmin.services import roles as roles_service
from factoryadmin.services import users as users_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text
from factoryadmin.utils.listing import filter_records, paginate, parse_page

bp = Blueprint("users", __name__, url_prefix="/users")
bp.before_request(blueprint_permission_guard("view_users"))

SEARCH_FIELDS = (
    lambda user: user.name,
    lambda user: user.email,
    lambda user: user.role.name if user.role else None,
)


def _load_roles():
    try:
        return roles_service.list_roles()
    except ApiError as exc:
        current_app.logger.warning("Role lookup for the user form failed: %s", exc.message)
        return []


def _render_form(form_values: dict[str, str], *, user: Optional[UserAccount] = None):
    return render_template(
        "users/form.html",
        form_values=form_values,
        user=user,
        roles=_load_roles(),
        title="Edit User" if user else "Create User",
        include_password_required=user is None,
    )


def _submitted_values() -> dict[str, str]:
    return {"name": form_text("name"), "email": form_text("email"), "role": form_text("role")}


def _payload(form_values: dict[str, str], password: str) -> dict[str, str]:
    payload = dict(form_values)
    if password:
        payload["password"] = password
    return payload


@bp.route("/")
def list_users():
    search = (request.args.get("search") or "").strip()
    records = []
    load_failed = False
    try:
        records = users_service.list_users()
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    pagination = paginate(
        filter_records(records, search, SEARCH_FIELDS),
        parse_page(request.args.get("page")),
        current_app.config.get("LIST_PAGE_SIZE", 25),
    )
    return render_template(
        "users/list.html",
        pagination=pagination,
        search=search,
        load_failed=load_failed,
    )


@bp.route("/new", methods=["GET", "POST"])
@permission_required("create_user")
def create():
    form_values = _submitted_values()
    if request.method == "POST":
        password = request.form.get("password") or ""
        if not form_values["name"] or not form_values["email"] or not form_values["role"] or not password:
            flash("Name, email, role and password are required.", "danger")
            return _render_form(form_values)
        try:
            users_service.create_user(_payload(form_values, password))
        except ApiError as exc:
            flash(exc.message or "Error saving user", "danger")
            return _render_form(form_values)
        flash("User created successfully", "success")
        return redirect(url_for("users.list_users"))
    return _render_form(form_values)


@bp.route("/<user_id>/edit", methods=["GET", "POST"])
@permission_required("edit_user")
def edit(user_id: str):
    try:
        user = users_service.get_user(user_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("users.list_users"))

    if request.method == "POST":
        form_values = _submitted_values()
        if not form_values["name"] or not form_values["email"] or not form_values["role"]:
            flash("Name, email and role are required.", "danger")
            return _render_form(form_values, user=user)
        try:
            users_service.update_user(user_id, _payload(form_values, request.form.get("password") or ""))
        except ApiError as exc:
            flash(exc.message or "Error saving user", "danger")
            return _render_form(form_values, user=user)
        flash("User updated successfully", "success")
        return redirect(url_for("users.list_users"))

    return _render_form(
        {"name": user.name, "email": user.email, "role": user.role.id if user.role else ""},
        user=user,
    )


@bp.route("/<user_id>/delete", methods=["GET", "POST"])
@permission_required("delete_user")
def delete(user_id: str):
    if request.method == "POST":
        try:
            users_service.delete_user(user_id)
        except ApiError as exc:
            flash(exc.message or "Error deleting user", "danger")
        else:
            flash("User deleted successfully", "success")
        return redirect(url_for("users.list_users"))

    try:
        user = users_service.get_user(user_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("users.list_users"))
    return render_template(
        "confirm_delete.html",
        title="Delete User",
        item_label=f"{user.name} ({user.email})",
        warning=None,
        action_url=url_for("users.delete", user_id=user_id),
        cancel_url=url_for("users.list_users"),
    )
