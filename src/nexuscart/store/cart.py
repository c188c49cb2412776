"""Line-item store: one user's cart held in memory and written back whole.

Mutations apply to the in-memory list first and are then persisted as a full
overwrite of the owner's cart document. There is no merge on write: the last
writer wins at the document level. Each write bumps the document version,
and ``apply_snapshot`` only accepts pushed snapshots newer than the version
this store last acknowledged.
"""

import logging
from dataclasses import dataclass

from django.db import DatabaseError, transaction

from nexuscart.core.exceptions import PersistenceError, ValidationError

from .broadcast import CartBroadcastService
from .models import Cart

logger = logging.getLogger(__name__)

# Largest value an integer column holds on every supported database
MAX_QUANTITY = 2147483647


@dataclass
class LineItem:
    product_id: str
    quantity: int = 1

    def to_dict(self) -> dict:
        return {"product_id": self.product_id, "quantity": self.quantity}


def normalize_items(raw_items) -> list[LineItem]:
    """Coerce a stored or pushed item list into line items.

    Entries for the same product are merged by summing quantities, quantities
    are clamped to 1..MAX_QUANTITY, and first-seen order is kept. Entries without
    a product id are dropped.
    """
    merged: dict[str, LineItem] = {}
    for raw in raw_items or []:
        if not isinstance(raw, dict):
            continue
        product_id = str(raw.get("product_id") or "").strip()
        if not product_id:
            logger.warning("Dropping cart entry without product id", extra={"entry": raw})
            continue
        try:
            quantity = min(max(1, int(raw.get("quantity", 1))), MAX_QUANTITY)
        except (TypeError, ValueError, OverflowError):
            quantity = 1
        if product_id in merged:
            item = merged[product_id]
            item.quantity = min(item.quantity + quantity, MAX_QUANTITY)
        else:
            merged[product_id] = LineItem(product_id, quantity)
    return list(merged.values())


def is_newer_snapshot(version: int, acknowledged: int) -> bool:
    """Whether a pushed snapshot should replace state at ``acknowledged``."""
    return version > acknowledged


def read_cart_document(owner) -> tuple[list[LineItem], int]:
    """Current items and version of the owner's cart; empty if never written."""
    cart = Cart.objects.filter(owner=owner).first()
    if cart is None:
        return [], 0
    return normalize_items(cart.items), cart.version


def write_cart_document(owner, items: list[LineItem]) -> int:
    """Overwrite the owner's cart document and return its new version.

    The snapshot is broadcast to the owner's live subscribers once the
    enclosing transaction commits.

    Raises:
        PersistenceError: the write failed
    """
    payload = [item.to_dict() for item in items]
    try:
        with transaction.atomic():
            cart, _ = Cart.objects.select_for_update().get_or_create(owner=owner)
            cart.items = payload
            cart.version += 1
            cart.save(update_fields=["items", "version", "updated_at"])
    except DatabaseError as e:
        logger.exception(
            "Failed to write cart",
            extra={"owner_id": str(owner.pk), "item_count": len(payload)},
        )
        raise PersistenceError() from e

    CartBroadcastService.broadcast_on_commit(owner.pk, payload, cart.version)
    return cart.version


def _clean_product_id(product_id) -> str:
    product_id = str(product_id).strip() if product_id is not None else ""
    if not product_id:
        raise ValidationError("Product id required")
    return product_id


def _parse_quantity(value) -> int:
    if isinstance(value, bool):
        raise ValidationError("Quantity must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError("Quantity must be a whole number")
    try:
        quantity = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError("Quantity must be a whole number")
    if quantity > MAX_QUANTITY:
        raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}")
    return quantity


class LineItemStore:
    """In-memory view of one owner's cart.

    A store without an authenticated owner accepts calls but changes nothing.
    """

    def __init__(self, owner=None, items=None, version: int = 0):
        if owner is not None and not owner.is_authenticated:
            owner = None
        self.owner = owner
        self._items: list[LineItem] = [LineItem(i.product_id, i.quantity) for i in items or []]
        self.version = version

    @classmethod
    def load(cls, owner) -> "LineItemStore":
        if owner is None or not owner.is_authenticated:
            return cls()
        items, version = read_cart_document(owner)
        return cls(owner, items, version)

    @property
    def items(self) -> list[LineItem]:
        """Copy of the current line items in insertion order."""
        return [LineItem(item.product_id, item.quantity) for item in self._items]

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self):
        return len(self._items)

    def quantity_of(self, product_id) -> int | None:
        item = self._find(str(product_id))
        return item.quantity if item else None

    def add(self, product_id):
        """Add one unit; an existing line is incremented rather than duplicated."""
        product_id = _clean_product_id(product_id)
        if self.owner is None:
            logger.debug("Ignoring cart add without an owner")
            return

        existing = self._find(product_id)
        if existing:
            existing.quantity = min(existing.quantity + 1, MAX_QUANTITY)
        else:
            self._items.append(LineItem(product_id, 1))
        self._persist()

    def set_quantity(self, product_id, quantity):
        """Set a line's quantity, clamped to a minimum of 1. Absent lines are ignored."""
        quantity = _parse_quantity(quantity)
        if self.owner is None:
            return

        item = self._find(str(product_id))
        if item is None:
            return
        item.quantity = max(1, quantity)
        self._persist()

    def remove(self, product_id):
        """Remove a line if present."""
        if self.owner is None:
            return

        product_id = str(product_id)
        remaining = [item for item in self._items if item.product_id != product_id]
        if len(remaining) == len(self._items):
            return
        self._items = remaining
        self._persist()

    def clear(self):
        if self.owner is None:
            return
        self._items = []
        self._persist()

    def apply_snapshot(self, raw_items, version: int) -> bool:
        """Replace local state with a pushed snapshot if it is newer.

        Returns False when the snapshot was discarded as stale.
        """
        if not is_newer_snapshot(version, self.version):
            logger.debug(
                "Discarding stale cart snapshot",
                extra={"snapshot_version": version, "local_version": self.version},
            )
            return False
        self._items = normalize_items(raw_items)
        self.version = version
        return True

    def replace(self, items: list[LineItem], version: int):
        """Adopt state that was already persisted elsewhere (e.g. checkout)."""
        self._items = [LineItem(item.product_id, item.quantity) for item in items]
        self.version = version

    def _find(self, product_id: str) -> LineItem | None:
        for item in self._items:
            if item.product_id == product_id:
                return item
        return None

    def _persist(self):
        self.version = write_cart_document(self.owner, self._items)
