import os

# Ensure required env vars have defaults for tests
os.environ.setdefault("SECRET_KEY", "test")
os.environ.setdefault("DB_ENGINE", "sqlite")

from .base import *  # noqa: E402,F401,F403

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Keep test runs quiet and off the mail server
EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
ADMINS = []

LOGGING["loggers"]["django.db.backends"]["level"] = "INFO"  # noqa: F405

STATIC_URL = "/static/"
