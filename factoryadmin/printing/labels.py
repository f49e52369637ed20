"""Product barcode labels rendered as ZPL."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

LABEL_WIDTH = 406  # dots for 2" width at 203 DPI
LABEL_HEIGHT = 203  # dots for 1" height at 203 DPI

_PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^}]+)\s*\}\}")


@dataclass(frozen=True)
class LabelDefinition:
    """A printable label layout with its field bindings."""

    name: str
    layout: Mapping[str, Any]
    fields: Mapping[str, str]
    description: str | None = None

    def render(self, context: Mapping[str, Any]) -> str:
        values = _resolve_fields(self.fields, context)
        return _render_layout(self.layout, values)


PRODUCT_LABEL = LabelDefinition(
    name="ProductBarcode",
    description="Product name, Code 128 SKU barcode and unit price.",
    layout={
        "width": LABEL_WIDTH,
        "height": LABEL_HEIGHT,
        "elements": [
            {"type": "box", "x": 5, "y": 5, "width": 396, "height": 193, "thickness": 2},
            {"type": "field", "fieldKey": "name", "x": 20, "y": 15, "fontSize": 24},
            {"type": "barcode", "fieldKey": "sku", "x": 20, "y": 50, "height": 80},
            {"type": "field", "fieldKey": "price", "x": 20, "y": 165, "fontSize": 22, "prefix": "$"},
        ],
    },
    fields={
        "name": "{{Product.name}}",
        "sku": "{{Product.sku}}",
        "price": "{{Product.unit_price}}",
    },
)


def format_price(value: Any) -> str:
    if isinstance(value, Decimal):
        return f"{value.quantize(Decimal('0.01'))}"
    try:
        return f"{Decimal(str(value)).quantize(Decimal('0.01'))}"
    except ArithmeticError:
        return str(value)


def build_product_label(product: Any, template: LabelDefinition = PRODUCT_LABEL) -> str:
    """Return the ZPL for one product label."""

    context = {
        "Product": {
            "name": getattr(product, "name", ""),
            "sku": getattr(product, "sku", ""),
            "unit_price": format_price(getattr(product, "unit_price", 0)),
        }
    }
    return template.render(context)


def build_product_labels(products: Iterable[Any], *, copies: int = 1) -> str:
    """Concatenate one label per product (``copies`` each) into a single job."""

    copies = max(int(copies), 1)
    labels = [build_product_label(product) for product in products for _ in range(copies)]
    return "\n".join(labels)


def _resolve_fields(fields: Mapping[str, str], context: Mapping[str, Any]) -> dict[str, str]:
    return {
        key: _sanitize_zpl_text(_evaluate_expression(expression, context))
        for key, expression in fields.items()
    }


def _evaluate_expression(expression: Any, context: Mapping[str, Any]) -> Any:
    if expression is None:
        return ""
    if isinstance(expression, str):
        match = _PLACEHOLDER_PATTERN.fullmatch(expression.strip())
        if match:
            path = [segment for segment in match.group(1).split(".") if segment]
            return _traverse_path(context, path)
    return expression


def _traverse_path(value: Any, segments: list[str]) -> Any:
    current = value
    for segment in segments:
        if current is None:
            return ""
        if isinstance(current, Mapping):
            current = current.get(segment)
        else:
            current = getattr(current, segment, None)
    return "" if current is None else current


def _render_layout(layout: Mapping[str, Any], field_values: Mapping[str, str]) -> str:
    width = int(layout.get("width") or LABEL_WIDTH)
    height = int(layout.get("height") or LABEL_HEIGHT)
    commands = ["^XA", f"^PW{width}", f"^LL{height}"]
    for element in layout.get("elements", []):
        commands.extend(_render_element(element, field_values))
    commands.append("^XZ")
    return "\n".join(commands)


def _render_element(element: Mapping[str, Any], field_values: Mapping[str, str]) -> list[str]:
    element_type = str(element.get("type", "field")).lower()
    x = int(element.get("x", 0))
    y = int(element.get("y", 0))

    if element_type == "field":
        value = field_values.get(element.get("fieldKey", ""), "")
        text = f"{_sanitize_zpl_text(element.get('prefix', ''))}{value}"
        height = int(element.get("fontSize") or 30)
        return [f"^FO{x},{y}^A0,N,{height}^FD{text}^FS"]

    if element_type == "barcode":
        value = field_values.get(element.get("fieldKey", ""), "")
        height = int(element.get("height") or 120)
        # Code 128 with the human-readable line printed below the bars.
        return [f"^FO{x},{y}^BY2^BCN,{height},Y,N,N^FD{value}^FS"]

    if element_type == "box":
        width = int(element.get("width", 0))
        height = int(element.get("height", 0))
        thickness = int(element.get("thickness", 2))
        return [f"^FO{x},{y}^GB{width},{height},{thickness},B,0^FS"]

    return []


def _sanitize_zpl_text(value: Any) -> str:
    text = "" if value is None else str(value)
    return text.replace("^", r"\^").replace("~", r"\~")
