from decimal import Decimal

from factoryadmin.models import Product
from factoryadmin.printing.labels import (
    PRODUCT_LABEL,
    LabelDefinition,
    build_product_label,
    build_product_labels,
)


def _product(**overrides):
    values = {"id": "p1", "name": "Widget", "sku": "WID-1001", "unit_price": Decimal("12.5")}
    values.update(overrides)
    return Product(**values)


def test_product_label_contains_code128_barcode():
    zpl = build_product_label(_product())

    assert zpl.startswith("^XA")
    assert zpl.endswith("^XZ")
    assert "^BCN,80,Y,N,N^FDWID-1001^FS" in zpl
    assert "^FDWidget^FS" in zpl
    assert "^FD$12.50^FS" in zpl


def test_control_characters_are_escaped():
    zpl = build_product_label(_product(name="Caret^Tilde~", sku="A^B"))

    assert r"Caret\^Tilde\~" in zpl
    assert r"^FDA\^B^FS" in zpl


def test_multiple_labels_with_copies():
    products = [_product(), _product(id="p2", name="Gadget", sku="GAD-2002")]

    zpl = build_product_labels(products, copies=2)

    assert zpl.count("^XA") == 4
    assert zpl.count("^FDGAD-2002^FS") == 2


def test_definition_resolves_nested_placeholders():
    template = LabelDefinition(
        name="Custom",
        layout={"elements": [{"type": "field", "fieldKey": "title", "x": 1, "y": 2}]},
        fields={"title": "{{ Item.Details.Title }}"},
    )

    zpl = template.render({"Item": {"Details": {"Title": "Hello"}}})

    assert "^FO1,2^A0,N,30^FDHello^FS" in zpl


def test_missing_values_render_blank():
    zpl = PRODUCT_LABEL.render({})

    assert "^FD^FS" in zpl
