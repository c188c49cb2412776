"""Tests for the seed_products management command."""

from io import StringIO

import pytest
from django.core.management import call_command

from nexuscart.store.management.commands.seed_products import PRODUCTS
from nexuscart.store.models import Product


@pytest.mark.django_db
class TestSeedProducts:
    """Tests for manage.py seed_products"""

    def test_seeds_empty_catalog(self):
        call_command("seed_products", stdout=StringIO())

        assert Product.objects.count() == len(PRODUCTS)

    def test_skips_when_catalog_has_products(self, product):
        out = StringIO()

        call_command("seed_products", stdout=out)

        assert Product.objects.count() == 1
        assert "skipping" in out.getvalue()

    def test_force_adds_missing_products_once(self, product):
        call_command("seed_products", "--force", stdout=StringIO())
        call_command("seed_products", "--force", stdout=StringIO())

        assert Product.objects.count() == len(PRODUCTS) + 1
