"""Core mixins for view access control.

Two guarded levels, both redirecting instead of rendering:
- CustomerRequiredMixin: any signed-in user (user or admin)
- AdminRequiredMixin: admins only
"""

from django.conf import settings
from django.contrib.auth.mixins import AccessMixin
from django.contrib.auth.views import redirect_to_login
from django.shortcuts import redirect

from .access import AccessLevel, classify, permits


class AccessGateMixin(AccessMixin):
    """Permit the view only when the session reaches ``required_level``."""

    required_level = AccessLevel.USER
    login_url = "/accounts/login/"
    redirect_field_name = "next"

    def get_access_level(self):
        session = getattr(self.request, "store_session", None)
        if session is not None:
            return session.access_level
        return classify(self.request.user)

    def dispatch(self, request, *args, **kwargs):
        if not permits(self.get_access_level(), self.required_level):
            return self.handle_no_permission()
        return super().dispatch(request, *args, **kwargs)

    def handle_no_permission(self):
        if self.get_access_level() == AccessLevel.ANONYMOUS:
            # Redirect unauthenticated users to login
            return redirect_to_login(
                self.request.get_full_path(),
                self.get_login_url(),
                self.get_redirect_field_name(),
            )
        return redirect(getattr(settings, "ACCESS_DENIED_REDIRECT_URL", "/"))


class CustomerRequiredMixin(AccessGateMixin):
    """Signed-in access: carts, checkout, order history."""

    required_level = AccessLevel.USER


class AdminRequiredMixin(AccessGateMixin):
    """Admin access: catalog and order management."""

    required_level = AccessLevel.ADMIN
