import pytest

from inventory_sync.domain.entities.sync_models import QueryFilter
from inventory_sync.infrastructure.external.unleashed.fetcher import PaginatedFetcher
from inventory_sync.shared.exceptions.sync import TransportError, UnexpectedStatus
from tests.conftest import FakeClient


def _page(items, pages):
    return {"Items": items, "Pagination": {"NumberOfItems": 5, "PageSize": 2, "NumberOfPages": pages}}


def test_fetch_concatenates_pages_in_order():
    client = FakeClient(
        {
            "Products": _page([{"ProductCode": "A"}, {"ProductCode": "B"}], 3),
            "Products/2": _page([{"ProductCode": "C"}, {"ProductCode": "D"}], 3),
            "Products/3": _page([{"ProductCode": "E"}], 3),
        }
    )

    items = PaginatedFetcher(client).fetch("Products", QueryFilter(modified_since="2024-01-31T09:15:00.000"))

    assert [i["ProductCode"] for i in items] == ["A", "B", "C", "D", "E"]
    assert [path for path, _ in client.calls] == ["Products", "Products/2", "Products/3"]
    assert all(params == {"modifiedSince": "2024-01-31T09:15:00.000"} for _, params in client.calls)


def test_fetch_without_pagination_is_single_page():
    client = FakeClient({"ProductGroups": {"Items": [{"GroupName": "Widgets"}]}})

    items = PaginatedFetcher(client).fetch("ProductGroups")

    assert items == [{"GroupName": "Widgets"}]
    assert client.calls == [("ProductGroups", {})]


def test_failed_page_discards_partial_result():
    client = FakeClient(
        {
            "SalesOrders": _page([{"OrderNumber": "SO-1"}], 3),
            "SalesOrders/2": UnexpectedStatus("SalesOrders/2", 500),
        }
    )

    with pytest.raises(UnexpectedStatus):
        PaginatedFetcher(client).fetch("SalesOrders")
    assert [path for path, _ in client.calls] == ["SalesOrders", "SalesOrders/2"]


def test_malformed_envelope_is_transport_error():
    client = FakeClient({"Products": {"Pagination": {"NumberOfPages": 1}}})

    with pytest.raises(TransportError):
        PaginatedFetcher(client).fetch("Products")


def test_invalid_number_of_pages():
    client = FakeClient({"Products": {"Items": [], "Pagination": {"NumberOfPages": "muchas"}}})

    with pytest.raises(TransportError):
        PaginatedFetcher(client).fetch("Products")
