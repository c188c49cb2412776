"""Cart totals derived from line items and the catalog.

Nothing here is cached except product resolution: counts and totals are
recomputed from the current line items on every call. Lines whose product
can no longer be resolved (deleted from the catalog) are left out of the
total and hidden from the cart view instead of raising.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable

from django.core.exceptions import ValidationError as DjangoValidationError

from .cart import LineItem
from .models import Product

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def round_money(amount: Decimal, places: int = 2) -> Decimal:
    """Round to specified decimal places using banker's rounding."""
    quantize_str = "0." + "0" * places
    return amount.quantize(Decimal(quantize_str), rounding=ROUND_HALF_EVEN)


class ProductLookup:
    """Resolves product ids to catalog entries, caching each id once.

    Misses are cached too, so a product deleted while the lookup is alive
    stays hidden and a product edited meanwhile keeps its first-seen price.
    """

    def __init__(self):
        self._cache: dict[str, Product | None] = {}

    def resolve(self, product_id) -> Product | None:
        product_id = str(product_id)
        if product_id not in self._cache:
            self._cache[product_id] = self._fetch(product_id)
        return self._cache[product_id]

    def prefetch(self, product_ids: Iterable[str]):
        """Fetch every not-yet-seen id in one query."""
        missing = {str(pid) for pid in product_ids} - self._cache.keys()
        if not missing:
            return
        keys = {}
        for pid in missing:
            try:
                keys[pid] = Product._meta.pk.to_python(pid)
            except DjangoValidationError:
                self._cache[pid] = None
        found = Product.objects.in_bulk(list(keys.values())) if keys else {}
        for pid, pk in keys.items():
            self._cache[pid] = found.get(pk)

    def clear(self):
        self._cache.clear()

    def _fetch(self, product_id: str) -> Product | None:
        try:
            return Product.objects.filter(pk=product_id).first()
        except DjangoValidationError:
            logger.debug("Unresolvable product id", extra={"product_id": product_id})
            return None


@dataclass
class CartLine:
    """A line item together with its resolved product."""

    item: LineItem
    product: Product

    @property
    def product_id(self) -> str:
        return self.item.product_id

    @property
    def quantity(self) -> int:
        return self.item.quantity

    @property
    def unit_price(self) -> Decimal:
        return self.product.price

    @property
    def subtotal(self) -> Decimal:
        return round_money(self.product.price * self.item.quantity)


def cart_count(items: Iterable[LineItem]) -> int:
    """Total number of units across all lines."""
    return sum(item.quantity for item in items)


def line_subtotal(item: LineItem, lookup: ProductLookup) -> Decimal | None:
    """Price times quantity, or None when the product cannot be resolved."""
    product = lookup.resolve(item.product_id)
    if product is None:
        return None
    return round_money(product.price * item.quantity)


def resolved_lines(items: Iterable[LineItem], lookup: ProductLookup) -> list[CartLine]:
    """Lines whose product resolves, in cart order."""
    items = list(items)
    lookup.prefetch(item.product_id for item in items)

    lines = []
    for item in items:
        product = lookup.resolve(item.product_id)
        if product is None:
            continue
        lines.append(CartLine(item=item, product=product))
    return lines


def cart_total(items: Iterable[LineItem], lookup: ProductLookup) -> Decimal:
    """Sum of subtotals over resolvable lines only."""
    total = sum((line.subtotal for line in resolved_lines(items, lookup)), ZERO)
    return round_money(total)
