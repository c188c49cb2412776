"""Session classification for view access control.

A session is anonymous, a signed-in user, or a signed-in admin. Admin is not
a separate sign-in: a signed-in identity is reclassified as admin when its
profile role says so. The only way back from admin to anonymous is signing
out.
"""

from enum import Enum

from .models import Role


class AccessLevel(str, Enum):
    ANONYMOUS = "anonymous"
    USER = "user"
    ADMIN = "admin"


# Levels that may reach a view requiring the key level
_ADMITTED = {
    AccessLevel.ANONYMOUS: {AccessLevel.ANONYMOUS, AccessLevel.USER, AccessLevel.ADMIN},
    AccessLevel.USER: {AccessLevel.USER, AccessLevel.ADMIN},
    AccessLevel.ADMIN: {AccessLevel.ADMIN},
}


def classify(user) -> AccessLevel:
    """Classify an identity (or None) into an access level."""
    if user is None or not user.is_authenticated or not user.is_active:
        return AccessLevel.ANONYMOUS
    if getattr(user, "role", None) == Role.ADMIN:
        return AccessLevel.ADMIN
    return AccessLevel.USER


def permits(level: AccessLevel, required: AccessLevel) -> bool:
    """Whether a session at ``level`` may reach a view requiring ``required``."""
    return level in _ADMITTED[required]


def is_admin(user) -> bool:
    return classify(user) == AccessLevel.ADMIN
