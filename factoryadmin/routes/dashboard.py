from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, current_app, render_template

from factoryadmin.auth import blueprint_permission_guard
from factoryadmin.services import categories as categories_service
from factoryadmin.services import products as products_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.session import get_session_manager, has_permission

bp = Blueprint("dashboard", __name__)
bp.before_request(blueprint_permission_guard("view_dashboard"))


@bp.route("/")
def home():
    threshold = current_app.config.get("LOW_STOCK_THRESHOLD", 10)
    product_summary = None
    category_count = None
    load_errors: list[str] = []

    if has_permission("view_products"):
        try:
            page = products_service.list_products()
        except ApiError as exc:
            load_errors.append(exc.message)
        else:
            # Low stock and value only cover the rows the backend returned.
            product_summary = {
                "count": page.total,
                "loaded": len(page.items),
                "partial": page.pages > 1 or page.total > len(page.items),
                "low_stock": sum(1 for product in page.items if product.stock_quantity < threshold),
                "stock_value": sum((product.stock_value for product in page.items), Decimal("0")),
            }

    if has_permission("view_categories"):
        try:
            category_count = len(categories_service.list_categories())
        except ApiError as exc:
            load_errors.append(exc.message)

    return render_template(
        "dashboard.html",
        identity=get_session_manager().current,
        product_summary=product_summary,
        category_count=category_count,
        load_errors=load_errors,
        low_stock_threshold=threshold,
    )
