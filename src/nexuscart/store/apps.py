from django.apps import AppConfig


class StoreConfig(AppConfig):
    name = "nexuscart.store"
    verbose_name = "Store"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        # Register the sign-out teardown receiver
        from . import session  # noqa: F401
