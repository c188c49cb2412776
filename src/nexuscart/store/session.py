"""Per-request store session context.

Carries the identity, its access level, the cart store and the product
lookup through a request instead of keeping them in module-level state.
The cart and lookup are built on first use and dropped on sign-out.
"""

import logging

from django.contrib.auth.signals import user_logged_out
from django.dispatch import receiver
from django.utils.functional import cached_property

from nexuscart.core.access import AccessLevel, classify

from .aggregation import ProductLookup
from .cart import LineItemStore

logger = logging.getLogger(__name__)


class StoreSession:
    """Session context for one request."""

    def __init__(self, user):
        self.user = user
        self._cart = None
        self._products = None

    @cached_property
    def access_level(self) -> AccessLevel:
        """Classified on first use so ``request.user`` stays lazy."""
        return classify(self.user)

    @property
    def is_authenticated(self) -> bool:
        return self.access_level != AccessLevel.ANONYMOUS

    @property
    def cart(self) -> LineItemStore:
        if self._cart is None:
            owner = self.user if self.is_authenticated else None
            self._cart = LineItemStore.load(owner)
        return self._cart

    @property
    def products(self) -> ProductLookup:
        if self._products is None:
            self._products = ProductLookup()
        return self._products

    def teardown(self):
        """Drop the identity and every derived cache."""
        self._cart = None
        if self._products is not None:
            self._products.clear()
        self._products = None
        self.user = None
        self.access_level = AccessLevel.ANONYMOUS


@receiver(user_logged_out)
def teardown_store_session(sender, request=None, user=None, **kwargs):
    session = getattr(request, "store_session", None) if request is not None else None
    if session is not None:
        session.teardown()
        logger.debug(
            "Store session torn down on sign-out",
            extra={"user_id": str(user.pk) if user else None},
        )
