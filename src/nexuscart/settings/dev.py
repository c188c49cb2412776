"""Development settings for NexusCart project."""

from .base import *  # noqa: F401,F403

DEBUG = True

SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-not-for-production")  # noqa: F405

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]"]

# No Redis required for local development
CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels.layers.InMemoryChannelLayer",
    }
}

STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage",
    },
}
