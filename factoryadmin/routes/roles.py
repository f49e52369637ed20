from __future__ import annotations

from typing import Optional

from flask import Blueprint, flash, redirect, render_template, request, url_for

from factoryadmin.auth import blueprint_permission_guard, permission_required
from factoryadmin.models import Role
from factoryadmin.permissions import AVAILABLE_PERMISSIONS, PERMISSION_LABELS
from factoryadmin.services import roles as roles_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text

bp = Blueprint("roles", __name__, url_prefix="/roles")
bp.before_request(blueprint_permission_guard("view_roles"))


def _selected_permissions() -> list[str]:
    # Unknown tags are dropped rather than forwarded to the backend.
    return [tag for tag in request.form.getlist("permissions") if tag in PERMISSION_LABELS]


def _retained_permissions(role: Optional[Role]) -> list[str]:
    """Tags the role holds that the editor has no checkbox for."""

    if role is None:
        return []
    return sorted(tag for tag in role.permissions if tag not in PERMISSION_LABELS)


def _render_form(form_values: dict, *, role: Optional[Role] = None):
    return render_template(
        "roles/form.html",
        form_values=form_values,
        role=role,
        available_permissions=AVAILABLE_PERMISSIONS,
        retained_permissions=_retained_permissions(role),
        title="Edit Role" if role else "Create Role",
    )


def _submitted_values() -> dict:
    return {
        "name": form_text("name"),
        "description": form_text("description"),
        "permissions": _selected_permissions(),
    }


@bp.route("/")
def list_roles():
    search = (request.args.get("search") or "").strip()
    records = []
    load_failed = False
    try:
        records = roles_service.list_roles(search=search)
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    return render_template(
        "roles/list.html",
        roles=records,
        search=search,
        load_failed=load_failed,
    )


@bp.route("/new", methods=["GET", "POST"])
@permission_required("create_role")
def create():
    form_values = _submitted_values()
    if request.method == "POST":
        if not form_values["name"]:
            flash("Role name is required.", "danger")
            return _render_form(form_values)
        try:
            roles_service.create_role(**form_values)
        except ApiError as exc:
            flash(exc.message or "Error saving role", "danger")
            return _render_form(form_values)
        flash("Role created successfully", "success")
        return redirect(url_for("roles.list_roles"))
    return _render_form(form_values)


@bp.route("/<role_id>/edit", methods=["GET", "POST"])
@permission_required("edit_role")
def edit(role_id: str):
    try:
        role = roles_service.get_role(role_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("roles.list_roles"))

    if request.method == "POST":
        form_values = _submitted_values()
        if not form_values["name"]:
            flash("Role name is required.", "danger")
            return _render_form(form_values, role=role)
        # Tags outside the checkbox catalog stay on the role untouched.
        payload = dict(form_values, permissions=form_values["permissions"] + _retained_permissions(role))
        try:
            roles_service.update_role(role_id, **payload)
        except ApiError as exc:
            flash(exc.message or "Error saving role", "danger")
            return _render_form(form_values, role=role)
        flash("Role updated successfully", "success")
        return redirect(url_for("roles.list_roles"))

    return _render_form(
        {
            "name": role.name,
            "description": role.description,
            "permissions": sorted(role.permissions),
        },
        role=role,
    )


@bp.route("/<role_id>/delete", methods=["GET", "POST"])
@permission_required("delete_role")
def delete(role_id: str):
    if request.method == "POST":
        try:
            roles_service.delete_role(role_id)
        except ApiError as exc:
            flash(exc.message or "Error deleting role", "danger")
        else:
            flash("Role deleted successfully", "success")
        return redirect(url_for("roles.list_roles"))

    try:
        role = roles_service.get_role(role_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("roles.list_roles"))
    return render_template(
        "confirm_delete.html",
        title="Delete Role",
        item_label=role.name,
        warning="Users assigned to this role may lose access.",
        action_url=url_for("roles.delete", role_id=role_id),
        cancel_url=url_for("roles.list_roles"),
    )
