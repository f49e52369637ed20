from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from factoryadmin.auth import blueprint_permission_guard
from factoryadmin.models import TRANSACTION_TYPES
from factoryadmin.services import products as products_service
from factoryadmin.services import stock as stock_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text, parse_int
from factoryadmin.utils.listing import parse_page

bp = Blueprint("stock", __name__, url_prefix="/stock")
bp.before_request(blueprint_permission_guard("manage_stock"))

TYPE_BADGES = {"IN": "success", "OUT": "danger", "ADJUSTMENT": "warning"}


def _filters() -> dict[str, str]:
    transaction_type = (request.args.get("type") or "").strip().upper()
    return {
        "search": (request.args.get("search") or "").strip(),
        "type": transaction_type if transaction_type in TRANSACTION_TYPES else "",
        "start_date": (request.args.get("startDate") or "").strip(),
        "end_date": (request.args.get("endDate") or "").strip(),
    }


def _load_products():
    try:
        return products_service.all_products()
    except ApiError as exc:
        current_app.logger.warning("Product lookup for the stock form failed: %s", exc.message)
        return []


@bp.route("/")
def list_transactions():
    filters = _filters()
    page_number = parse_page(request.args.get("page"))
    result = None
    load_failed = False
    try:
        result = stock_service.list_transactions(
            page=page_number,
            limit=current_app.config.get("STOCK_PAGE_SIZE", 20),
            **filters,
        )
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    return render_template(
        "stock/list.html",
        result=result,
        filters=filters,
        transaction_types=TRANSACTION_TYPES,
        type_badges=TYPE_BADGES,
        load_failed=load_failed,
    )


@bp.route("/new", methods=["GET", "POST"])
def create():
    form_values = {
        "product": form_text("product"),
        "type": form_text("type", "IN").upper(),
        "quantity": form_text("quantity", "1"),
        "reason": form_text("reason"),
    }

    if request.method == "POST":
        quantity = parse_int(form_values["quantity"], minimum=1)
        errors = []
        if not form_values["product"]:
            errors.append("Select a product.")
        if form_values["type"] not in TRANSACTION_TYPES:
            errors.append("Select a valid transaction type.")
        if quantity is None:
            errors.append("Quantity must be a whole number of at least 1.")

        if not errors:
            try:
                stock_service.create_transaction(
                    form_values["product"],
                    form_values["type"],
                    quantity,
                    form_values["reason"],
                )
            except ApiError as exc:
                errors.append(exc.message or "Error adding stock entry")
            else:
                flash("Stock entry added successfully", "success")
                return redirect(url_for("stock.list_transactions"))

        for message in errors:
            flash(message, "danger")

    return render_template(
        "stock/form.html",
        form_values=form_values,
        products=_load_products(),
        transaction_types=TRANSACTION_TYPES,
    )
