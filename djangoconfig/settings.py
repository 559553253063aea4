"""
Django settings for the artifacts service.

Values come from artifacts.src.config (environment variables, optionally
loaded from .env.dev/.env.prod).
"""

from artifacts.src.config import get_config

config = get_config()

SECRET_KEY = config.django_secret_key
DEBUG = config.debug
ALLOWED_HOSTS = config.allowed_hosts

INSTALLED_APPS = [
    "corsheaders",
    "artifacts.apps.ArtifactsConfig",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

# "*" lets any origin call the API
if "*" in config.cors_allowed_origins:
    CORS_ALLOW_ALL_ORIGINS = True
else:
    CORS_ALLOWED_ORIGINS = config.cors_allowed_origins

ROOT_URLCONF = "djangoconfig.urls"
WSGI_APPLICATION = "djangoconfig.wsgi.application"

# Artifacts live in Qdrant, there is no relational database
DATABASES = {}

# Routes accept an optional trailing slash themselves
APPEND_SLASH = False

USE_TZ = True
TIME_ZONE = "UTC"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "loggers": {
        "artifacts": {
            "handlers": ["console"],
            "level": config.log_level,
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": False,
        },
    },
}
