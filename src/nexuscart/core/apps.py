"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core application."""

    name = "nexuscart.core"
    verbose_name = "NexusCart Core"
    default_auto_field = "django.db.models.BigAutoField"
