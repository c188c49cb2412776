"""URL configuration for NexusCart project."""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from nexuscart.core.views import health_check, index

urlpatterns = [
    path("", index, name="index"),

    # Health check
    path("health/", health_check, name="health_check"),

    # Django admin
    path("admin/", admin.site.urls),

    # Authentication
    path("accounts/", include("nexuscart.core.urls", namespace="accounts")),

    # Store
    path("shop/", include("nexuscart.store.urls", namespace="store")),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
