import pytest

from catalog.products.models import PageRequest, SortOrder
from catalog.services.product_service import InvalidParameterError, build_page, parse_page_request

BASE = "/api/products"


def test_middle_page():
    page = build_page([], 25, PageRequest(limit=10, page=2), BASE)
    assert page.totalPages == 3
    assert page.hasPrevPage is True
    assert page.hasNextPage is True
    assert page.prevPage == 1
    assert page.nextPage == 3
    assert page.prevLink == "/api/products?limit=10&page=1"
    assert page.nextLink == "/api/products?limit=10&page=3"


def test_single_page():
    page = build_page([], 5, PageRequest(limit=10, page=1), BASE)
    assert page.totalPages == 1
    assert page.hasPrevPage is False
    assert page.hasNextPage is False
    assert page.prevPage is None
    assert page.nextPage is None
    assert page.prevLink is None
    assert page.nextLink is None


def test_empty_collection():
    page = build_page([], 0, PageRequest(limit=10, page=1), BASE)
    assert page.totalPages == 0
    assert page.hasNextPage is False


def test_links_echo_sort():
    page = build_page([], 30, PageRequest(limit=10, page=2, sort=SortOrder.desc), BASE)
    assert page.nextLink == "/api/products?limit=10&page=3&sort=desc"
    assert page.prevLink == "/api/products?limit=10&page=1&sort=desc"


@pytest.mark.parametrize(
    "total,limit,page",
    [(0, 1, 1), (1, 1, 1), (9, 4, 3), (10, 5, 2), (101, 10, 7), (7, 100, 1)],
)
def test_metadata_invariants(total, limit, page):
    p = build_page([], total, PageRequest(limit=limit, page=page), BASE)
    assert p.totalPages == -(-total // limit)
    assert p.hasNextPage == (page < p.totalPages)
    assert p.hasPrevPage == (page > 1)


def test_parse_defaults():
    req = parse_page_request(None, None, None, default_limit=10)
    assert (req.limit, req.page, req.sort) == (10, 1, None)


def test_parse_strings():
    req = parse_page_request("5", "3", "asc")
    assert (req.limit, req.page, req.sort) == (5, 3, SortOrder.asc)


@pytest.mark.parametrize(
    "limit,page,sort",
    [("abc", None, None), ("0", None, None), ("-2", None, None), (None, "0", None), (None, "x", None), (None, None, "sideways"), ("2.5", None, None)],
)
def test_parse_rejects_bad_input(limit, page, sort):
    with pytest.raises(InvalidParameterError) as exc:
        parse_page_request(limit, page, sort)
    assert exc.value.details


def test_parse_caps_limit():
    with pytest.raises(InvalidParameterError):
        parse_page_request("500", "1", None, max_limit=100)


def test_parse_rejects_page_past_int64_skip():
    with pytest.raises(InvalidParameterError) as exc:
        parse_page_request("10", str(10**23), None)
    assert exc.value.details[0]["field"] == "page"


def test_parse_accepts_last_encodable_page():
    req = parse_page_request("1", str(2**63), None)
    assert req.page == 2**63
