"""Tests for cart totals and product resolution."""

from decimal import Decimal

import pytest

from nexuscart.store.aggregation import (
    ProductLookup,
    cart_count,
    cart_total,
    line_subtotal,
    resolved_lines,
    round_money,
)
from nexuscart.store.cart import LineItem
from nexuscart.store.models import Product

from .conftest import pid


class TestRoundMoney:
    """Tests for round_money"""

    def test_rounds_half_to_even(self):
        assert round_money(Decimal("0.125")) == Decimal("0.12")
        assert round_money(Decimal("0.135")) == Decimal("0.14")

    def test_pads_to_two_places(self):
        assert str(round_money(Decimal("5"))) == "5.00"


class TestCartCount:
    """Tests for cart_count"""

    def test_sums_quantities(self):
        assert cart_count([LineItem("p1", 2), LineItem("p2", 3)]) == 5

    def test_empty_cart_counts_zero(self):
        assert cart_count([]) == 0


@pytest.mark.django_db
class TestCartTotal:
    """Tests for cart_total and line_subtotal"""

    def test_price_times_quantity(self, cart_store, product, lookup):
        cart_store.add(pid(product))
        cart_store.add(pid(product))

        assert cart_total(cart_store.items, lookup) == Decimal("19.98")

    def test_total_follows_quantity_clamp(self, cart_store, product, lookup):
        cart_store.add(pid(product))
        cart_store.add(pid(product))

        cart_store.set_quantity(pid(product), 0)

        assert cart_store.quantity_of(pid(product)) == 1
        assert cart_total(cart_store.items, lookup) == Decimal("9.99")

    def test_total_over_several_products(self, cart_store, product, second_product, lookup):
        cart_store.add(pid(product))
        cart_store.add(pid(second_product))
        cart_store.set_quantity(pid(second_product), 3)

        assert cart_total(cart_store.items, lookup) == Decimal("24.99")

    def test_empty_cart_totals_zero(self, lookup):
        assert cart_total([], lookup) == Decimal("0.00")

    def test_deleted_product_is_left_out(self, cart_store, product, second_product):
        cart_store.add(pid(product))
        cart_store.add(pid(second_product))
        second_product.delete()

        lookup = ProductLookup()

        assert cart_total(cart_store.items, lookup) == Decimal("9.99")
        assert cart_count(cart_store.items) == 2
        assert [line.product_id for line in resolved_lines(cart_store.items, lookup)] == [
            pid(product)
        ]

    def test_line_subtotal(self, product, lookup):
        assert line_subtotal(LineItem(pid(product), 3), lookup) == Decimal("29.97")

    @pytest.mark.parametrize(
        "product_id",
        ["not-a-uuid", "00000000-0000-0000-0000-000000000000"],
    )
    def test_line_subtotal_of_unresolvable_product_is_none(self, product_id, lookup):
        assert line_subtotal(LineItem(product_id, 1), lookup) is None


@pytest.mark.django_db
class TestProductLookup:
    """Tests for ProductLookup caching"""

    def test_resolve_caches_hits(self, product, lookup, django_assert_num_queries):
        assert lookup.resolve(pid(product)) == product

        with django_assert_num_queries(0):
            assert lookup.resolve(pid(product)) == product

    def test_resolve_caches_misses(self, product, lookup, django_assert_num_queries):
        missing = "00000000-0000-0000-0000-000000000000"
        assert lookup.resolve(missing) is None

        with django_assert_num_queries(0):
            assert lookup.resolve(missing) is None

    def test_first_seen_price_is_kept(self, product, lookup):
        lookup.resolve(pid(product))
        Product.objects.filter(pk=product.pk).update(price=Decimal("12.00"))

        assert lookup.resolve(pid(product)).price == Decimal("9.99")
        assert ProductLookup().resolve(pid(product)).price == Decimal("12.00")

    def test_prefetch_uses_one_query(
        self, product, second_product, lookup, django_assert_num_queries
    ):
        with django_assert_num_queries(1):
            lookup.prefetch([pid(product), pid(second_product), "not-a-uuid"])

        with django_assert_num_queries(0):
            assert lookup.resolve(pid(product)) == product
            assert lookup.resolve(pid(second_product)) == second_product
            assert lookup.resolve("not-a-uuid") is None

    def test_clear_forgets_cached_products(self, product, lookup, django_assert_num_queries):
        lookup.resolve(pid(product))
        Product.objects.filter(pk=product.pk).update(price=Decimal("12.00"))

        lookup.clear()

        with django_assert_num_queries(1):
            assert lookup.resolve(pid(product)).price == Decimal("12.00")
