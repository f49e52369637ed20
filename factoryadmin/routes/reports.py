from __future__ import annotations

from flask import Blueprint, current_app, flash, redirect, render_template, url_for

from factoryadmin.auth import blueprint_permission_guard
from factoryadmin.services import reports as reports_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.utils.csv_export import export_rows_to_csv
from factoryadmin.utils.pdf_export import export_rows_to_pdf
from factoryadmin.utils.spreadsheet_export import export_rows_to_xlsx

bp = Blueprint("reports", __name__, url_prefix="/reports")
bp.before_request(blueprint_permission_guard("view_reports"))

REPORT_TITLE = "Stock Report"

SPREADSHEET_COLUMNS = (
    ("name", "Name"),
    ("sku", "SKU"),
    ("catalog_name", "Catalog"),
    ("stock_quantity", "Stock Quantity"),
    ("unit_price", "Unit Price"),
    ("cost_price", "Cost Price"),
    ("stock_value", "Total Value"),
)

# The PDF keeps the printed report's "Category" header over the catalog name.
PDF_COLUMNS = (
    ("name", "Name"),
    ("sku", "SKU"),
    ("catalog_name", "Category"),
    ("stock_quantity", "Stock"),
    ("unit_price", "Price"),
    (lambda product: f"{product.stock_value:.2f}", "Total Value"),
)


def _load_report():
    try:
        return reports_service.inventory_report()
    except ApiError as exc:
        flash(exc.message, "danger")
        return None


@bp.route("/")
def stock_report():
    report = _load_report()
    return render_template(
        "reports/stock.html",
        report=report,
        load_failed=report is None,
        low_stock_threshold=current_app.config.get("LOW_STOCK_THRESHOLD", 10),
    )


@bp.route("/export.xlsx")
def export_xlsx():
    report = _load_report()
    if report is None:
        return redirect(url_for("reports.stock_report"))
    return export_rows_to_xlsx(
        report.products,
        SPREADSHEET_COLUMNS,
        "StockReport.xlsx",
        sheet_title=REPORT_TITLE,
    )


@bp.route("/export.pdf")
def export_pdf():
    report = _load_report()
    if report is None:
        return redirect(url_for("reports.stock_report"))
    return export_rows_to_pdf(report.products, PDF_COLUMNS, "StockReport.pdf", title=REPORT_TITLE)


@bp.route("/export.csv")
def export_csv():
    report = _load_report()
    if report is None:
        return redirect(url_for("reports.stock_report"))
    return export_rows_to_csv(report.products, SPREADSHEET_COLUMNS, "StockReport.csv")
