"""Order service layer: checkout and fulfilment status.

Views should call these functions instead of manipulating order models
directly.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, IntegrityError, transaction

from nexuscart.core.access import is_admin
from nexuscart.core.exceptions import (
    AccessDeniedError,
    EmptyCartError,
    InvalidStatusTransition,
    PersistenceError,
    ValidationError,
)

from .aggregation import ZERO, CartLine, ProductLookup, resolved_lines, round_money
from .cart import LineItemStore, write_cart_document
from .models import STATUS_SEQUENCE, Order, OrderItem, OrderStatus, OrderStatusEvent

logger = logging.getLogger(__name__)


def _max_order_total() -> Decimal:
    """First amount too large for ``Order.total_amount``."""
    field = Order._meta.get_field("total_amount")
    return Decimal(10) ** (field.max_digits - field.decimal_places)


def order_total(lines: list[CartLine]) -> Decimal:
    return round_money(sum((line.subtotal for line in lines), ZERO))


def place_order(
    owner,
    store: LineItemStore,
    lookup: ProductLookup,
    idempotency_key: str | None = None,
) -> Order:
    """Turn the owner's cart into a pending order and empty the cart.

    Product name and price are copied into each order line at this moment.
    Lines whose product no longer resolves are left out. The order rows and
    the cleared cart document commit together or not at all; the in-memory
    store is only cleared after the commit.

    Args:
        owner: User placing the order (must own ``store``)
        store: The owner's line-item store
        lookup: Product lookup used to price the lines
        idempotency_key: Optional client token; a repeated key returns the
            order already placed with it

    Returns:
        The placed Order

    Raises:
        EmptyCartError: Cart is empty or none of its lines resolve
        ValidationError: The total does not fit an order record
        PersistenceError: The order could not be written; cart unchanged
    """
    if idempotency_key:
        existing = Order.objects.filter(user=owner, idempotency_key=idempotency_key).first()
        if existing is not None:
            logger.info(
                "Returning previously placed order for repeated checkout",
                extra={"order_id": str(existing.pk), "owner_id": str(owner.pk)},
            )
            return existing

    if store.is_empty:
        raise EmptyCartError()

    lines = resolved_lines(store.items, lookup)
    if not lines:
        raise EmptyCartError("None of the items in your cart are available")

    dropped = len(store) - len(lines)
    if dropped:
        logger.info(
            "Dropping unavailable products from order",
            extra={"owner_id": str(owner.pk), "dropped": dropped},
        )

    total = order_total(lines)
    if total >= _max_order_total():
        raise ValidationError("Order total is too large; reduce item quantities")

    try:
        with transaction.atomic():
            order = Order.objects.create(
                user=owner,
                total_amount=total,
                status=OrderStatus.PENDING,
                idempotency_key=idempotency_key or None,
            )
            OrderItem.objects.bulk_create([
                OrderItem(
                    order=order,
                    product_id=line.product_id,
                    name=line.product.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                    position=position,
                )
                for position, line in enumerate(lines)
            ])
            version = write_cart_document(owner, [])
    except IntegrityError as e:
        # Concurrent checkout with the same key won the race
        if idempotency_key:
            existing = Order.objects.filter(user=owner, idempotency_key=idempotency_key).first()
            if existing is not None:
                return existing
        logger.exception("Failed to place order", extra={"owner_id": str(owner.pk)})
        raise PersistenceError("Failed to place order. Please try again.") from e
    except (DatabaseError, PersistenceError) as e:
        logger.exception("Failed to place order", extra={"owner_id": str(owner.pk)})
        raise PersistenceError("Failed to place order. Please try again.") from e

    store.replace([], version)

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.pk),
            "owner_id": str(owner.pk),
            "total_amount": str(total),
            "line_count": len(lines),
        },
    )
    return order


def _rank(status: str) -> int:
    return STATUS_SEQUENCE.index(status)


@transaction.atomic
def update_order_status(order: Order, new_status: str, actor) -> Order:
    """Move an order forward through fulfilment.

    Forward moves may skip steps (pending -> shipped). Setting the current
    status again is a no-op and records nothing.

    Args:
        order: Order to update
        new_status: Target status (pending, processing, shipped, delivered)
        actor: Admin user making the change

    Returns:
        The order as stored after the update; ``order.status`` is synced too

    Raises:
        AccessDeniedError: actor is not an admin
        ValidationError: new_status is not a known status
        InvalidStatusTransition: new_status is behind the current status
    """
    if not is_admin(actor):
        raise AccessDeniedError("Only admins can change order status")

    if new_status not in OrderStatus.values:
        raise ValidationError(
            f"Invalid status: {new_status}. Must be one of {list(OrderStatus.values)}"
        )

    # Compare against the locked row, not the caller's possibly stale copy
    locked = Order.objects.select_for_update().get(pk=order.pk)
    old_status = locked.status
    order.status = old_status
    if new_status == old_status:
        return locked

    if _rank(new_status) < _rank(old_status):
        raise InvalidStatusTransition(old_status, new_status)

    locked.status = new_status
    locked.save(update_fields=["status", "updated_at"])
    order.status = locked.status
    order.updated_at = locked.updated_at

    OrderStatusEvent.objects.create(
        order=locked,
        from_status=old_status,
        to_status=new_status,
        actor=actor,
    )

    logger.info(
        "Order status changed",
        extra={
            "order_id": str(order.pk),
            "from_status": old_status,
            "to_status": new_status,
            "actor_id": str(actor.pk),
        },
    )
    return locked
