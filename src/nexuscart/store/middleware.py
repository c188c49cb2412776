"""Store middleware for NexusCart."""

from .session import StoreSession


class StoreSessionMiddleware:
    """Attach a ``StoreSession`` to each request as ``request.store_session``.

    Must run after ``AuthenticationMiddleware``. Views read it through
    ``get_store_session``, which rebuilds the context when sign-in or
    sign-out changed the identity mid-request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.store_session = StoreSession(request.user)
        response = self.get_response(request)
        return response


def get_store_session(request) -> StoreSession:
    """Session context for ``request``, rebuilt if the identity changed."""
    session = getattr(request, "store_session", None)
    if session is None or session.user is not request.user:
        session = StoreSession(request.user)
        request.store_session = session
    return session
