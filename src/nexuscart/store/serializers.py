"""Plain-dict representations of store records for JSON responses."""


def _money(amount) -> str:
    return f"{amount:.2f}"


def product_to_dict(product):
    return {
        "id": str(product.pk),
        "name": product.name,
        "description": product.description,
        "price": _money(product.price),
        "image_url": product.image_url,
        "category": product.category,
        "created_at": product.created_at.isoformat() if product.created_at else None,
        "updated_at": product.updated_at.isoformat() if product.updated_at else None,
    }


def cart_line_to_dict(line):
    return {
        "product_id": line.product_id,
        "quantity": line.quantity,
        "product": product_to_dict(line.product),
        "subtotal": _money(line.subtotal),
    }


def order_item_to_dict(item):
    return {
        "product_id": item.product_id,
        "name": item.name,
        "unit_price": _money(item.unit_price),
        "quantity": item.quantity,
        "subtotal": _money(item.subtotal),
    }


def order_to_dict(order):
    return {
        "id": str(order.pk),
        "user_id": str(order.user_id),
        "items": [order_item_to_dict(item) for item in order.items.all()],
        "total_amount": _money(order.total_amount),
        "status": order.status,
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }
