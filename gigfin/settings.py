# gigfin/settings.py
# ─────────────────────────────────────────────────────────────────────────────
# ⚙️ Project settings. Everything environment-specific is read from the
#    process environment (optionally seeded from a local .env file).
# ─────────────────────────────────────────────────────────────────────────────

import os
from pathlib import Path

from dotenv import load_dotenv                                  # 🔑 read .env into os.environ

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env")


def _env_bool(name, default=False):
    """Interpret '1/true/yes/on' (any case) as True."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name, default):
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# ===== Core ==================================================================
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "dev-only-insecure-key-change-me")
DEBUG = _env_bool("DJANGO_DEBUG", default=True)
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "accounts.apps.AccountsConfig",                             # 👤 profile, auth API, 2FA
    "finance.apps.FinanceConfig",                               # 💷 incomes, expenses, odometers
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "gigfin.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "gigfin.wsgi.application"

# ===== Database ==============================================================
# 💾 SQLite file; DB_FILE_NAME may carry a "file:" prefix
_db_file = os.getenv("DB_FILE_NAME", "file:./data/db.sqlite").removeprefix("file:")
_db_path = Path(_db_file)
if not _db_path.is_absolute():
    _db_path = BASE_DIR / _db_path
_db_path.parent.mkdir(parents=True, exist_ok=True)

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": _db_path,
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ===== Auth & sessions =======================================================
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_AGE = 60 * 60 * 24 * 14                          # two weeks

# ===== I18N ==================================================================
LANGUAGE_CODE = "en-gb"
TIME_ZONE = os.getenv("TZ_NAME", "Europe/London")
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

# ===== Cache (entry store) ===================================================
# Entry lists are invalidated on every write, so all worker processes must
# share one backend. The default is a database table (create it once with
# `python manage.py createcachetable`). LocMemCache is only safe with a
# single process.
CACHES = {
    "default": {
        "BACKEND": os.getenv("GIGFIN_CACHE_BACKEND", "django.core.cache.backends.db.DatabaseCache"),
        "LOCATION": os.getenv("GIGFIN_CACHE_LOCATION", "gigfin_cache"),
    }
}

# ===== GigFin ================================================================
GIGFIN = {
    "LOGS_PAGE_SIZE": _env_int("GIGFIN_LOGS_PAGE_SIZE", 10),    # 📄 rows per log page
    "TOTP_ISSUER": os.getenv("GIGFIN_TOTP_ISSUER", "GigFin"),  # 🔐 shown in authenticator apps
    "STORE_TIMEOUT": _env_int("GIGFIN_STORE_TIMEOUT", 300),     # ⏱️ seconds an entry list stays cached
    "MONTHLY_WINDOW": 6,                                        # 📈 buckets in the monthly totals series
}

# ===== Logging ===============================================================
LOG_LEVEL = os.getenv("GIGFIN_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING"},
        "accounts": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "finance": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "gigfin": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
