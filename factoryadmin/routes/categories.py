from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from factoryadmin.auth import blueprint_permission_guard, permission_required
from factoryadmin.services import categories as categories_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text
from factoryadmin.utils.listing import filter_records, paginate, parse_page

bp = Blueprint("categories", __name__, url_prefix="/categories")
bp.before_request(blueprint_permission_guard("view_categories"))

SEARCH_FIELDS = (
    lambda category: category.name,
    lambda category: category.code,
    lambda category: category.description,
)


def _submitted_values() -> dict[str, str]:
    return {
        "name": form_text("name"),
        "code": form_text("code"),
        "description": form_text("description"),
    }


def _render_form(form_values: dict[str, str], *, category_id: str | None = None):
    return render_template(
        "categories/form.html",
        form_values=form_values,
        category_id=category_id,
        title="Edit Category" if category_id else "Add Category",
    )


@bp.route("/")
def list_categories():
    search = (request.args.get("search") or "").strip()
    records = []
    load_failed = False
    try:
        records = categories_service.list_categories()
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    pagination = paginate(
        filter_records(records, search, SEARCH_FIELDS),
        parse_page(request.args.get("page")),
        current_app.config.get("LIST_PAGE_SIZE", 25),
    )
    return render_template(
        "categories/list.html",
        pagination=pagination,
        search=search,
        load_failed=load_failed,
    )


@bp.route("/new", methods=["GET", "POST"])
@permission_required("manage_categories")
def create():
    form_values = _submitted_values()
    if request.method == "POST":
        if not form_values["name"] or not form_values["code"]:
            flash("Name and code are required.", "danger")
            return _render_form(form_values)
        try:
            categories_service.create_category(**form_values)
        except ApiError as exc:
            flash(exc.message or "Error saving category", "danger")
            return _render_form(form_values)
        flash("Category created successfully", "success")
        return redirect(url_for("categories.list_categories"))
    return _render_form(form_values)


@bp.route("/<category_id>/edit", methods=["GET", "POST"])
@permission_required("manage_categories")
def edit(category_id: str):
    if request.method == "POST":
        form_values = _submitted_values()
        if not form_values["name"] or not form_values["code"]:
            flash("Name and code are required.", "danger")
            return _render_form(form_values, category_id=category_id)
        try:
            categories_service.update_category(category_id, **form_values)
        except ApiError as exc:
            flash(exc.message or "Error saving category", "danger")
            return _render_form(form_values, category_id=category_id)
        flash("Category updated successfully", "success")
        return redirect(url_for("categories.list_categories"))

    try:
        category = categories_service.get_category(category_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("categories.list_categories"))
    return _render_form(
        {"name": category.name, "code": category.code, "description": category.description},
        category_id=category_id,
    )


@bp.route("/<category_id>/delete", methods=["GET", "POST"])
@permission_required("manage_categories")
def delete(category_id: str):
    if request.method == "POST":
        try:
            categories_service.delete_category(category_id)
        except ApiError as exc:
            flash(exc.message or "Error deleting category", "danger")
        else:
            flash("Category deleted successfully", "success")
        return redirect(url_for("categories.list_categories"))

    try:
        category = categories_service.get_category(category_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("categories.list_categories"))
    return render_template(
        "confirm_delete.html",
        title="Delete Category",
        item_label=category.name,
        warning="Products in this category will show as Uncategorized.",
        action_url=url_for("categories.delete", category_id=category_id),
        cancel_url=url_for("categories.list_categories"),
    )
