import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("SECRET_KEY", "nonrandom_secret")

DEBUG = os.environ.get("DEBUG", "1") == "1"

ALLOWED_HOSTS = os.environ.get("ALLOWED_HOSTS", "127.0.0.1,localhost").split(",")


# Application definition

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "notes.apps.NotesConfig",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "mathnotes.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
            ],
        },
    },
]

WSGI_APPLICATION = "mathnotes.wsgi.application"


# Database

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("DATABASE_PATH", BASE_DIR / "db.sqlite3"),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# Internationalization

LANGUAGE_CODE = "en-us"

TIME_ZONE = "UTC"

USE_I18N = False

USE_TZ = True


# Static files

STATIC_URL = "/static/"


# Logging

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "{levelname} {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        "notes": {
            "handlers": ["console"],
            "level": os.environ.get("NOTES_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}


# AsciiMath

ASCIIMATH = {
    "BLOCK_PREFIXES": os.environ.get("ASCIIMATH_BLOCK_PREFIXES", "asciimath,am"),
    "INLINE": {
        "open": os.environ.get("ASCIIMATH_INLINE_OPEN", "`$"),
        "close": os.environ.get("ASCIIMATH_INLINE_CLOSE", "$`"),
    },
    "CUSTOM_SYMBOLS": [],
    "REPLACE_MATH_BLOCK": os.environ.get("ASCIIMATH_REPLACE_MATH_BLOCK") == "1",
    "TRANSLATOR": "notes.translators.ASCIIMathTranslator",
}

MATHNOTES_API_KEY = os.environ.get("MATHNOTES_API_KEY", "")
