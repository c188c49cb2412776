"""Core views for NexusCart: health check and identity endpoints.

Identity endpoints back the storefront SPA:
- POST /accounts/register/
- POST /accounts/login/
- POST /accounts/logout/
- GET  /accounts/me/
"""

import logging

from django.conf import settings
from django.contrib.auth import authenticate, get_user_model, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, connection
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import ensure_csrf_cookie

from .access import classify
from .exceptions import AuthError, DuplicateRegistrationError, StoreError, ValidationError
from .http import error_response, json_body

logger = logging.getLogger(__name__)


def health_check(request):
    """Liveness probe: answers 503 when the database is unreachable."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error("Health check failed", extra={"error": str(e)})
        return JsonResponse({"status": "unhealthy", "database": "unreachable"}, status=503)
    return JsonResponse({"status": "healthy", "database": "connected"})


def user_to_dict(user):
    return {
        "uid": str(user.pk),
        "email": user.email,
        "role": user.role,
        "display_name": user.get_display_name(),
    }


def _credentials(request):
    data = json_body(request)
    email = str(data.get("email", "")).strip().lower()
    password = str(data.get("password", ""))
    if not email or not password:
        raise ValidationError("Email and password required")
    return email, password


class RegisterView(View):
    """Create an account with role ``user`` and sign it in."""

    def post(self, request):
        User = get_user_model()
        try:
            email, password = _credentials(request)
            if User.objects.filter(email__iexact=email).exists():
                raise DuplicateRegistrationError()
            try:
                validate_password(password, User(email=email))
            except DjangoValidationError as e:
                raise ValidationError(" ".join(e.messages))
            try:
                user = User.objects.create_user(email=email, password=password)
            except IntegrityError:
                raise DuplicateRegistrationError()
        except StoreError as e:
            return error_response(e)

        login(request, user, backend="nexuscart.core.backends.EmailBackend")
        logger.info("User registered", extra={"user_id": str(user.pk)})
        return JsonResponse({"user": user_to_dict(user)}, status=201)


class LoginView(View):
    """Email + password sign-in."""

    def post(self, request):
        try:
            email, password = _credentials(request)
            user = authenticate(request, username=email, password=password)
            if user is None:
                raise AuthError()
        except StoreError as e:
            return error_response(e)

        login(request, user)
        return JsonResponse({
            "user": user_to_dict(user),
            "access_level": classify(user).value,
        })


class LogoutView(View):
    """Sign out; the session context is torn down on ``user_logged_out``."""

    def post(self, request):
        logout(request)
        return JsonResponse({"status": "signed_out"})


@method_decorator(ensure_csrf_cookie, name="dispatch")
class MeView(View):
    """Current identity and its access level."""

    def get(self, request):
        user = request.user
        level = classify(user)
        return JsonResponse({
            "authenticated": user.is_authenticated,
            "access_level": level.value,
            "user": user_to_dict(user) if user.is_authenticated else None,
        })


def index(request):
    """API root: store name and the caller's access level."""
    return JsonResponse({
        "store": settings.STORE_NAME,
        "access_level": classify(request.user).value,
    })
