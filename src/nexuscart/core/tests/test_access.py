"""Tests for session classification and the access gate."""

import pytest
from django.contrib.auth.models import AnonymousUser
from django.http import JsonResponse
from django.test import RequestFactory
from django.views import View

from nexuscart.core.access import AccessLevel, classify, is_admin, permits
from nexuscart.core.mixins import AdminRequiredMixin, CustomerRequiredMixin
from nexuscart.core.models import Role


class CustomerOnlyView(CustomerRequiredMixin, View):
    def get(self, request):
        return JsonResponse({"ok": True})


class AdminOnlyView(AdminRequiredMixin, View):
    def get(self, request):
        return JsonResponse({"ok": True})


def get(view_class, user, path="/shop/manage/"):
    request = RequestFactory().get(path)
    request.user = user
    return view_class.as_view()(request)


# =============================================================================
# Classification
# =============================================================================


@pytest.mark.django_db
class TestClassify:
    """Tests for classify"""

    def test_no_identity_is_anonymous(self):
        assert classify(None) == AccessLevel.ANONYMOUS
        assert classify(AnonymousUser()) == AccessLevel.ANONYMOUS

    def test_customer_is_user(self, customer):
        assert classify(customer) == AccessLevel.USER
        assert not is_admin(customer)

    def test_admin_role_is_admin(self, store_admin):
        assert classify(store_admin) == AccessLevel.ADMIN
        assert is_admin(store_admin)

    def test_inactive_account_is_anonymous(self, store_admin):
        store_admin.is_active = False

        assert classify(store_admin) == AccessLevel.ANONYMOUS

    def test_staff_flag_alone_does_not_make_admin(self, customer):
        customer.is_staff = True

        assert classify(customer) == AccessLevel.USER

    def test_role_change_reclassifies(self, customer):
        customer.role = Role.ADMIN

        assert classify(customer) == AccessLevel.ADMIN


class TestPermits:
    """Tests for permits"""

    @pytest.mark.parametrize(
        "level, required, allowed",
        [
            (AccessLevel.ANONYMOUS, AccessLevel.ANONYMOUS, True),
            (AccessLevel.ANONYMOUS, AccessLevel.USER, False),
            (AccessLevel.ANONYMOUS, AccessLevel.ADMIN, False),
            (AccessLevel.USER, AccessLevel.USER, True),
            (AccessLevel.USER, AccessLevel.ADMIN, False),
            (AccessLevel.ADMIN, AccessLevel.USER, True),
            (AccessLevel.ADMIN, AccessLevel.ADMIN, True),
        ],
    )
    def test_permits(self, level, required, allowed):
        assert permits(level, required) is allowed


# =============================================================================
# Access gate mixins
# =============================================================================


@pytest.mark.django_db
class TestAccessGateMixins:
    """Tests for CustomerRequiredMixin and AdminRequiredMixin"""

    def test_anonymous_redirects_to_login_with_next(self):
        response = get(CustomerOnlyView, AnonymousUser(), "/shop/cart/")

        assert response.status_code == 302
        assert response.url == "/accounts/login/?next=/shop/cart/"

    def test_customer_passes_customer_gate(self, customer):
        assert get(CustomerOnlyView, customer).status_code == 200

    def test_customer_is_redirected_from_admin_gate(self, customer):
        response = get(AdminOnlyView, customer)

        assert response.status_code == 302
        assert response.url == "/"

    def test_admin_passes_both_gates(self, store_admin):
        assert get(CustomerOnlyView, store_admin).status_code == 200
        assert get(AdminOnlyView, store_admin).status_code == 200

    def test_redirect_target_is_configurable(self, customer, settings):
        settings.ACCESS_DENIED_REDIRECT_URL = "/shop/products/"

        response = get(AdminOnlyView, customer)

        assert response.url == "/shop/products/"
