from __future__ import annotations

from flask import current_app

from factoryadmin.extensions import api
from factoryadmin.models import InventoryReport


def inventory_report() -> InventoryReport:
    data = api.get("/reports/inventory", error_message="Error fetching report data")
    if isinstance(data, list):
        data = {"products": data}
    threshold = current_app.config.get("LOW_STOCK_THRESHOLD", 10)
    return InventoryReport.from_api(data or {}, low_stock_threshold=threshold)
