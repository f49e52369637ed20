from __future__ import annotations

from decimal import Decimal
from typing import Optional

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from werkzeug.datastructures import FileStorage

from factoryadmin.auth import blueprint_permission_guard, permission_required
from factoryadmin.models import Product
from factoryadmin.services import categories as categories_service
from factoryadmin.services import products as products_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import form_text, parse_decimal, parse_int
from factoryadmin.utils.listing import parse_page

bp = Blueprint("products", __name__, url_prefix="/products")
bp.before_request(blueprint_permission_guard("view_products"))

EMPTY_FORM = {
    "name": "",
    "sku": "",
    "category": "",
    "description": "",
    "unit_price": "",
    "cost_price": "",
    "stock_quantity": "0",
}


def stock_status(quantity: int) -> str:
    """Badge colour for a stock level."""

    if quantity <= current_app.config.get("STOCK_STATUS_DANGER", 5):
        return "danger"
    if quantity <= current_app.config.get("STOCK_STATUS_WARNING", 20):
        return "warning"
    return "success"


def _load_categories():
    try:
        return categories_service.list_categories()
    except ApiError as exc:
        current_app.logger.warning("Category lookup failed: %s", exc.message)
        return []


def _form_from_product(product: Product) -> dict[str, str]:
    return {
        "name": product.name,
        "sku": product.sku,
        "category": product.category.id if product.category else "",
        "description": product.description,
        "unit_price": str(product.unit_price),
        "cost_price": str(product.cost_price),
        "stock_quantity": str(product.stock_quantity),
    }


def _allowed_image(image: Optional[FileStorage]) -> bool:
    if image is None or not image.filename:
        return True
    extension = image.filename.rsplit(".", 1)[-1].lower() if "." in image.filename else ""
    return extension in current_app.config.get("PRODUCT_IMAGE_ALLOWED_EXTENSIONS", set())


def _validate(form_values: dict[str, str], image: Optional[FileStorage]) -> list[str]:
    errors: list[str] = []
    if not form_values["name"] or not form_values["sku"]:
        errors.append("Name and SKU are required.")
    for key, label in (("unit_price", "Unit price"), ("cost_price", "Cost price")):
        if parse_decimal(form_values[key], minimum=Decimal("0")) is None:
            errors.append(f"{label} must be a number of at least 0.")
    if parse_int(form_values["stock_quantity"], minimum=0) is None:
        errors.append("Stock quantity must be a whole number of at least 0.")
    if not _allowed_image(image):
        errors.append("Unsupported image type.")
    return errors


def _render_form(form_values: dict[str, str], *, product: Optional[Product] = None):
    return render_template(
        "products/form.html",
        form_values=form_values,
        product=product,
        categories=_load_categories(),
        title="Edit Product" if product else "Add Product",
    )


def _save(form_values: dict[str, str], *, product: Optional[Product] = None):
    if request.form.get("action") == "generate_sku":
        form_values["sku"] = products_service.generate_sku(form_values["name"])
        return _render_form(form_values, product=product)

    image = request.files.get("image")
    errors = _validate(form_values, image)
    if errors:
        for message in errors:
            flash(message, "danger")
        return _render_form(form_values, product=product)

    try:
        if product is None:
            products_service.create_product(form_values, image)
        else:
            products_service.update_product(product.id, form_values, image)
    except ApiError as exc:
        flash(exc.message or "Error saving product", "danger")
        return _render_form(form_values, product=product)

    flash("Product updated successfully" if product else "Product created successfully", "success")
    return redirect(url_for("products.list_products"))


def _submitted_values() -> dict[str, str]:
    values = {key: form_text(key) for key in EMPTY_FORM}
    values["stock_quantity"] = values["stock_quantity"] or "0"
    return values


@bp.route("/")
def list_products():
    keyword = (request.args.get("keyword") or "").strip()
    category = (request.args.get("category") or "").strip()
    page_number = parse_page(request.args.get("page"))
    result = None
    load_failed = False
    try:
        result = products_service.list_products(
            keyword=keyword,
            category=category,
            page=page_number,
            limit=current_app.config.get("LIST_PAGE_SIZE", 25),
        )
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    return render_template(
        "products/list.html",
        result=result,
        keyword=keyword,
        category=category,
        categories=_load_categories(),
        load_failed=load_failed,
        stock_status=stock_status,
    )


@bp.route("/new", methods=["GET", "POST"])
@permission_required("create_product")
def create():
    if request.method == "POST":
        return _save(_submitted_values())
    return _render_form(dict(EMPTY_FORM))


@bp.route("/<product_id>/edit", methods=["GET", "POST"])
@permission_required("edit_product")
def edit(product_id: str):
    try:
        product = products_service.get_product(product_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("products.list_products"))

    if request.method == "POST":
        return _save(_submitted_values(), product=product)
    return _render_form(_form_from_product(product), product=product)


@bp.route("/<product_id>/delete", methods=["GET", "POST"])
@permission_required("delete_product")
def delete(product_id: str):
    if request.method == "POST":
        try:
            products_service.delete_product(product_id)
        except ApiError as exc:
            flash(exc.message or "Error deleting product", "danger")
        else:
            flash("Product deleted successfully", "success")
        return redirect(url_for("products.list_products"))

    try:
        product = products_service.get_product(product_id)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("products.list_products"))
    return render_template(
        "confirm_delete.html",
        title="Delete Product",
        item_label=f"{product.name} ({product.sku})",
        warning=None,
        action_url=url_for("products.delete", product_id=product_id),
        cancel_url=url_for("products.list_products"),
    )
