"""Shared pytest fixtures for nexuscart tests."""

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from nexuscart.core.models import Role


User = get_user_model()


@pytest.fixture
def client():
    """Return a Django test client."""
    return Client()


@pytest.fixture
def customer(db):
    """Create a signed-up customer (role user)."""
    return User.objects.create_user(
        email="customer@example.com",
        password="testpass123",
        first_name="Casey",
        last_name="Customer",
    )


@pytest.fixture
def other_customer(db):
    """Create a second customer."""
    return User.objects.create_user(
        email="other@example.com",
        password="testpass123",
    )


@pytest.fixture
def store_admin(db):
    """Create an account with the admin role."""
    return User.objects.create_user(
        email="admin@nexuscart.test",
        password="testpass123",
        role=Role.ADMIN,
    )


@pytest.fixture
def customer_client(customer):
    """Client signed in as the customer."""
    client = Client()
    client.force_login(customer)
    return client


@pytest.fixture
def store_admin_client(store_admin):
    """Client signed in as the store admin."""
    client = Client()
    client.force_login(store_admin)
    return client
