"""Catalog service layer: product reads and admin writes."""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction

from nexuscart.core.exceptions import NotFoundError, PersistenceError

from .images import store_product_image
from .models import Product

logger = logging.getLogger(__name__)


def list_products(category: str | None = None, query: str | None = None):
    """Catalog newest first, optionally filtered by category and name."""
    products = Product.objects.all()
    if category:
        products = products.filter(category__iexact=category)
    if query:
        products = products.filter(name__icontains=query)
    return products.order_by("-created_at")


def get_product(product_id) -> Product:
    """Fetch a product by id.

    Raises:
        NotFoundError: No product with that id
    """
    try:
        product = Product.objects.filter(pk=product_id).first()
    except DjangoValidationError:
        product = None
    if product is None:
        raise NotFoundError("Product not found")
    return product


def save_product(form, image=None, actor=None) -> Product:
    """Persist a valid ``ProductForm``, uploading ``image`` first if given.

    An edit without a new image keeps the current ``image_url``.

    Raises:
        ValidationError: image rejected
        PersistenceError: image storage or database write failed
    """
    product = form.save(commit=False)
    if image is not None:
        product.image_url = store_product_image(image)

    creating = product._state.adding
    try:
        with transaction.atomic():
            product.save()
    except DatabaseError as e:
        logger.exception("Failed to save product", extra={"product_id": str(product.pk)})
        raise PersistenceError("Error saving product") from e

    logger.info(
        "Product created" if creating else "Product updated",
        extra={
            "product_id": str(product.pk),
            "actor_id": str(actor.pk) if actor else None,
        },
    )
    return product


def delete_product(product: Product, actor=None):
    """Remove a product from the catalog.

    Carts keep referencing the id and simply stop showing the line; placed
    orders keep their copied name and price.
    """
    product_id = str(product.pk)
    try:
        product.delete()
    except DatabaseError as e:
        logger.exception("Failed to delete product", extra={"product_id": product_id})
        raise PersistenceError("Error deleting product") from e

    logger.info(
        "Product deleted",
        extra={"product_id": product_id, "actor_id": str(actor.pk) if actor else None},
    )
