"""Shared pytest fixtures for nexuscart.store tests."""

from decimal import Decimal

import pytest

from nexuscart.store.aggregation import ProductLookup
from nexuscart.store.cart import LineItemStore
from nexuscart.store.models import Product


@pytest.fixture
def product(db):
    """Create a catalog product priced 9.99."""
    return Product.objects.create(
        name="Pocket Widget",
        description="A widget that fits in a pocket.",
        price=Decimal("9.99"),
        category="Gadgets",
        image_url="https://cdn.example.com/widget.jpg",
    )


@pytest.fixture
def second_product(db):
    """Create a second catalog product priced 5.00."""
    return Product.objects.create(
        name="Desk Lamp",
        description="Warm LED desk lamp.",
        price=Decimal("5.00"),
        category="Home",
    )


@pytest.fixture
def cart_store(customer):
    """The customer's line-item store, loaded from the database."""
    return LineItemStore.load(customer)


@pytest.fixture
def lookup():
    """A fresh product lookup."""
    return ProductLookup()


def pid(product):
    """Cart id for a product."""
    return str(product.pk)
