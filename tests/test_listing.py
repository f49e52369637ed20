from factoryadmin.models import Catalog, Product
from factoryadmin.services.base import build_page, unwrap_list
from factoryadmin.utils.listing import filter_records, paginate, parse_page

CATALOGS = [Catalog(id=str(i), name=f"Catalog {i}", code=f"C{i:02d}") for i in range(1, 8)]
FIELDS = (lambda catalog: catalog.name, lambda catalog: catalog.code)


def test_blank_query_keeps_everything():
    assert filter_records(CATALOGS, "   ", FIELDS) == CATALOGS
    assert filter_records(CATALOGS, None, FIELDS) == CATALOGS


def test_query_is_case_insensitive_substring():
    assert [catalog.id for catalog in filter_records(CATALOGS, "c03", FIELDS)] == ["3"]


def test_paginate_clamps_page_numbers():
    pagination = paginate(CATALOGS, 9, 3)

    assert pagination.page == 3
    assert pagination.pages == 3
    assert [catalog.id for catalog in pagination.items] == ["7"]
    assert pagination.has_previous and not pagination.has_next


def test_paginate_empty_list_has_one_page():
    pagination = paginate([], 1, 25)

    assert pagination.pages == 1
    assert pagination.items == ()


def test_parse_page_defaults_to_first():
    assert parse_page(None) == 1
    assert parse_page("abc") == 1
    assert parse_page("-3") == 1
    assert parse_page("4") == 4


def test_unwrap_list_accepts_array_or_wrapper():
    assert unwrap_list([{"_id": "1"}], "products") == [{"_id": "1"}]
    assert unwrap_list({"products": [{"_id": "1"}]}, "products") == [{"_id": "1"}]
    assert unwrap_list({"message": "odd"}, "products") == []
    assert unwrap_list(None, "products") == []


def test_build_page_reads_paging_metadata():
    page = build_page(
        {"products": [{"id": "p1", "name": "A", "sku": "A"}], "page": 2, "totalPages": 5, "total": 41},
        "products",
        Product.from_api,
    )

    assert page.page == 2
    assert page.pages == 5
    assert page.total == 41
    assert page.items[0].id == "p1"


def test_build_page_computes_pages_from_limit():
    page = build_page({"products": [], "total": 45}, "products", Product.from_api, page=1, limit=20)

    assert page.pages == 3
