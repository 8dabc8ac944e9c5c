"""Integration tests for order list filtering, ordering and pagination."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.orders.models import Order

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


@pytest.fixture()
def three_orders(make_order):
    """PENDING 150.00, CONFIRMED 20.00, CANCELLED 5.00."""
    pending = make_order()
    confirmed = make_order("CONFIRMED", items=(("Pen", 4, "5.00"),))
    cancelled = make_order("CANCELLED", items=(("Clip", 1, "5.00"),))
    return pending, confirmed, cancelled


class TestStatusFilter:
    @pytest.mark.parametrize(
        "status, index", [("PENDING", 0), ("CONFIRMED", 1), ("CANCELLED", 2)]
    )
    def test_filter_by_status(self, auth_client, three_orders, status, index):
        data = auth_client.get(ORDERS_URL, {"status": status}).json()

        assert data["count"] == 1
        assert data["results"][0]["id"] == str(three_orders[index].id)

    def test_unknown_status_is_rejected(self, auth_client, three_orders):
        response = auth_client.get(ORDERS_URL, {"status": "SHIPPED"})
        assert response.status_code == 400


class TestRangeFilters:
    def test_total_range(self, auth_client, three_orders):
        data = auth_client.get(ORDERS_URL, {"min_total": "10", "max_total": "100"}).json()

        assert [r["id"] for r in data["results"]] == [str(three_orders[1].id)]

    def test_date_range(self, auth_client, three_orders):
        old = three_orders[0]
        Order.objects.filter(id=old.id).update(
            created_at=timezone.now() - timedelta(days=10)
        )
        today = timezone.now().date()

        recent = auth_client.get(ORDERS_URL, {"start_date": today.isoformat()}).json()
        before = auth_client.get(
            ORDERS_URL, {"end_date": (today - timedelta(days=5)).isoformat()}
        ).json()

        assert str(old.id) not in [r["id"] for r in recent["results"]]
        assert recent["count"] == 2
        assert [r["id"] for r in before["results"]] == [str(old.id)]


class TestOrdering:
    def test_default_is_newest_first(self, auth_client, three_orders):
        data = auth_client.get(ORDERS_URL).json()

        assert [r["id"] for r in data["results"]] == [
            str(o.id) for o in reversed(three_orders)
        ]

    def test_order_by_total(self, auth_client, three_orders):
        data = auth_client.get(ORDERS_URL, {"ordering": "total_amount"}).json()

        totals = [Decimal(r["total_amount"]) for r in data["results"]]
        assert totals == sorted(totals)


class TestPagination:
    def test_per_page(self, auth_client, three_orders):
        data = auth_client.get(ORDERS_URL, {"per_page": 2}).json()

        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["next"] is not None

        second = auth_client.get(ORDERS_URL, {"per_page": 2, "page": 2}).json()
        assert len(second["results"]) == 1
        assert second["next"] is None

    def test_default_page_size(self, auth_client, make_order):
        for _ in range(16):
            make_order()

        data = auth_client.get(ORDERS_URL).json()

        assert data["count"] == 16
        assert len(data["results"]) == 15

    def test_page_out_of_range_returns_404(self, auth_client, three_orders):
        response = auth_client.get(ORDERS_URL, {"page": 5})
        assert response.status_code == 404
