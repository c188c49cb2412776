"""Tests for the per-request store session context."""

import pytest
from django.contrib.auth import logout
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.http import HttpResponse
from django.test import RequestFactory
from django.utils.functional import SimpleLazyObject

from nexuscart.core.access import AccessLevel
from nexuscart.store.middleware import StoreSessionMiddleware, get_store_session
from nexuscart.store.session import StoreSession

from .conftest import pid


@pytest.fixture
def rf():
    return RequestFactory()


@pytest.mark.django_db
class TestStoreSession:
    """Tests for StoreSession"""

    def test_customer_session(self, customer):
        session = StoreSession(customer)

        assert session.access_level == AccessLevel.USER
        assert session.is_authenticated
        assert session.cart.owner == customer

    def test_admin_session(self, store_admin):
        assert StoreSession(store_admin).access_level == AccessLevel.ADMIN

    def test_anonymous_session_has_ownerless_cart(self):
        session = StoreSession(AnonymousUser())

        assert session.access_level == AccessLevel.ANONYMOUS
        assert session.cart.owner is None

    def test_cart_and_lookup_are_built_once(self, customer):
        session = StoreSession(customer)

        assert session.cart is session.cart
        assert session.products is session.products

    def test_user_is_not_loaded_until_access_level_is_read(self, customer):
        loads = []

        def load_user():
            loads.append(1)
            return customer

        session = StoreSession(SimpleLazyObject(load_user))
        assert loads == []

        assert session.access_level == AccessLevel.USER
        assert session.access_level == AccessLevel.USER
        assert loads == [1]

    def test_teardown_drops_identity_and_caches(
        self, customer, product, django_assert_num_queries
    ):
        session = StoreSession(customer)
        session.cart.add(pid(product))
        lookup = session.products
        lookup.resolve(pid(product))

        session.teardown()

        assert session.user is None
        assert session.access_level == AccessLevel.ANONYMOUS
        assert session.cart.owner is None
        assert session.cart.is_empty
        with django_assert_num_queries(1):
            lookup.resolve(pid(product))


@pytest.mark.django_db
class TestSessionLifecycle:
    """Sign-out and identity changes reset the session context."""

    def test_logout_tears_down_session(self, rf, customer):
        request = rf.post("/accounts/logout/")
        request.user = customer
        request.session = SessionStore()
        request.store_session = StoreSession(customer)
        request.store_session.cart

        logout(request)

        assert request.store_session.user is None
        assert request.store_session.access_level == AccessLevel.ANONYMOUS

    def test_get_store_session_follows_identity_change(self, rf, customer):
        request = rf.get("/")
        request.user = AnonymousUser()
        request.store_session = StoreSession(request.user)

        request.user = customer
        session = get_store_session(request)

        assert session.user is customer
        assert session.access_level == AccessLevel.USER
        assert request.store_session is session

    def test_get_store_session_reuses_current_context(self, rf, customer):
        request = rf.get("/")
        request.user = customer
        request.store_session = StoreSession(customer)

        assert get_store_session(request) is request.store_session

    def test_middleware_leaves_request_user_lazy(self, rf, customer):
        loads = []

        def load_user():
            loads.append(1)
            return customer

        request = rf.get("/")
        request.user = SimpleLazyObject(load_user)
        middleware = StoreSessionMiddleware(lambda r: HttpResponse())

        middleware(request)

        assert loads == []
        assert request.store_session.access_level == AccessLevel.USER
        assert loads == [1]
