from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from factoryadmin.auth import blueprint_permission_guard, permission_required
from factoryadmin.services import catalogs as catalogs_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text
from factoryadmin.utils.listing import filter_records, paginate, parse_page

bp = Blueprint("catalog", __name__, url_prefix="/catalog")
bp.before_request(blueprint_permission_guard("view_catalog"))

SEARCH_FIELDS = (lambda catalog: catalog.name, lambda catalog: catalog.code)


@bp.route("/")
def list_catalogs():
    search = (request.args.get("search") or "").strip()
    catalogs = []
    load_failed = False
    try:
        catalogs = catalogs_service.list_catalogs()
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    filtered = filter_records(catalogs, search, SEARCH_FIELDS)
    pagination = paginate(
        filtered,
        parse_page(request.args.get("page")),
        current_app.config.get("LIST_PAGE_SIZE", 25),
    )
    return render_template(
        "catalog/list.html",
        pagination=pagination,
        search=search,
        load_failed=load_failed,
    )


def _render_form(form_values: dict[str, str], *, catalog_id: str | None = None):
    return render_template(
        "catalog/form.html",
        form_values=form_values,
        catalog_id=catalog_id,
        title="Edit Catalog" if catalog_id else "Add Catalog",
    )


@bp.route("/new", methods=["GET", "POST"])
@permission_required("manage_catalog")
def create():
    form_values = {"name": form_text("name"), "code": form_text("code")}
    if request.method == "POST":
        if not form_values["name"] or not form_values["code"]:
            flash("Name and code are required.", "danger")
            return _render_form(form_values)
        try:
            catalogs_service.create_catalog(form_values["name"], form_values["code"])
        except ApiError as exc:
            flash(exc.message or "Error saving catalog", "danger")
            return _render_form(form_values)
        flash("Catalog created successfully", "success")
        return redirect(url_for("catalog.list_catalogs"))
    return _render_form(form_values)


@bp.route("/<catalog_id>/edit", methods=["GET", "POST"])
@permission_required("manage_catalog")
def edit(catalog_id: str):
    if request.method == "POST":
        form_values = {"name": form_text("name"), "code": form_text("code")}
        if not form_values["name"] or not form_values["code"]:
            flash("Name and code are required.", "danger")
            return _render_form(form_values, catalog_id=catalog_id)
        try:
            catalogs_service.update_catalog(catalog_id, form_values["name"], form_values["code"])
        except ApiError as exc:
            flash(exc.message or "Error saving catalog", "danger")
            return _render_form(form_values, catalog_id=catalog_id)
        flash("Catalog updated successfully", "success")
        return redirect(url_for("catalog.list_catalogs"))

    try:
        catalog = catalogs_service.get_catalog(catalog_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("catalog.list_catalogs"))
    return _render_form({"name": catalog.name, "code": catalog.code}, catalog_id=catalog_id)


@bp.route("/<catalog_id>/delete", methods=["GET", "POST"])
@permission_required("manage_catalog")
def delete(catalog_id: str):
    if request.method == "POST":
        try:
            catalogs_service.delete_catalog(catalog_id)
        except ApiError as exc:
            flash(exc.message or "Error deleting catalog", "danger")
        else:
            flash("Catalog deleted successfully", "success")
        return redirect(url_for("catalog.list_catalogs"))

    try:
        catalog = catalogs_service.get_catalog(catalog_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("catalog.list_catalogs"))
    return render_template(
        "confirm_delete.html",
        title="Delete Catalog",
        item_label=f"{catalog.name} ({catalog.code})",
        warning=None,
        action_url=url_for("catalog.delete", catalog_id=catalog_id),
        cancel_url=url_for("catalog.list_catalogs"),
    )
