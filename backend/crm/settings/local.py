# crm/settings/local.py

import os
from .base import *  # noqa: F401, F403

DEBUG = True

SECRET_KEY = "dev-secret-key-not-for-production"

ALLOWED_HOSTS = ["localhost", "127.0.0.1", "web"]

# Works both locally (localhost) and in container (postgres)
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ.get("DATABASE_NAME", "crm"),
        "USER": os.environ.get("DATABASE_USER", "crm"),
        "PASSWORD": os.environ.get("DATABASE_PASSWORD", "crm"),
        "HOST": os.environ.get("DATABASE_HOST", "localhost"),
        "PORT": os.environ.get("DATABASE_PORT", "5432"),
    }
}

# Browsable API is handy while developing
REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
        "rest_framework.renderers.BrowsableAPIRenderer",
    ],
}

LOGGING["loggers"]["apps"]["level"] = "DEBUG"  # noqa: F405
