from __future__ import annotations

from flask import (
    Blueprint,
    Response,
    abort,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    url_for,
)

from factoryadmin.auth import blueprint_permission_guard
from factoryadmin.printing.labels import build_product_label, build_product_labels
from factoryadmin.printing.zebra import LabelRenderError, render_label_png, send_zpl
from factoryadmin.services import products as products_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.forms import parse_int
from factoryadmin.utils.listing import filter_records

bp = Blueprint("barcodes", __name__, url_prefix="/barcodes")
bp.before_request(blueprint_permission_guard("view_barcodes"))

SEARCH_FIELDS = (lambda product: product.name, lambda product: product.sku)


def _selected_products(product_ids: list[str]):
    wanted = [product_id for product_id in product_ids if product_id]
    if not wanted:
        return []
    by_id = {product.id: product for product in products_service.all_products()}
    return [by_id[product_id] for product_id in wanted if product_id in by_id]


def _copies() -> int:
    return parse_int(request.values.get("copies"), minimum=1) or 1


@bp.route("/")
def select_products():
    search = (request.args.get("search") or "").strip()
    products = []
    load_failed = False
    try:
        products = products_service.all_products()
    except ApiError as exc:
        load_failed = True
        flash(exc.message, "danger")

    return render_template(
        "barcodes/select.html",
        products=filter_records(products, search, SEARCH_FIELDS),
        search=search,
        load_failed=load_failed,
    )


@bp.route("/labels", methods=["POST"])
def labels():
    product_ids = request.form.getlist("product_ids")
    try:
        selected = _selected_products(product_ids)
    except ApiError as exc:
        flash(exc.message, "danger")
        return redirect(url_for("barcodes.select_products"))

    if not selected:
        flash("Select at least one product.", "warning")
        return redirect(url_for("barcodes.select_products"))

    action = request.form.get("action", "sheet")
    copies = _copies()

    if action == "zpl":
        response = Response(build_product_labels(selected, copies=copies), mimetype="text/plain")
        response.headers["Content-Disposition"] = "attachment; filename=labels.zpl"
        return response

    if action == "print":
        if send_zpl(build_product_labels(selected, copies=copies)):
            flash(f"Sent {len(selected) * copies} label(s) to the printer.", "success")
        else:
            flash("Could not reach the label printer.", "danger")
        return redirect(url_for("barcodes.select_products"))

    return render_template("barcodes/sheet.html", products=selected, copies=copies)


@bp.route("/<product_id>/preview.png")
def preview(product_id: str):
    try:
        product = products_service.get_product(product_id)
    except ApiError as exc:
        current_app.logger.warning("Label preview lookup failed: %s", exc.message)
        abort(404)

    try:
        image = render_label_png(build_product_label(product))
    except LabelRenderError:
        abort(502)
    return Response(image, mimetype="image/png")
