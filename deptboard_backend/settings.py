"""
settings.py — Django project configuration for the Department Board backend

What this file configures
===============================================================================
- Core Django wiring (INSTALLED_APPS, MIDDLEWARE, TEMPLATES, DB)
- REST Framework defaults (portal token auth, filtering, error envelope)
- SimpleJWT signing settings used by users.tokens (7-day session tokens)
- Admin gate (users.gateway.AdminGateMiddleware) for post creation/edit pages
- CORS for FE ↔ BE requests
- Production serving of static via WhiteNoise
- Swagger (drf-yasg) configured to use Bearer tokens in the Authorize dialog
- CSP (django-csp v4) `frame-ancestors` limited to self + the frontend origin

How environment variables drive behavior (deployment-safe)
===============================================================================
DJANGO_DEBUG            -> Enables dev mode when true. Defaults to True locally.
DJANGO_SECRET_KEY       -> Required when DJANGO_DEBUG=False (production).
DJANGO_ALLOWED_HOSTS    -> Comma-separated list of allowed hostnames in prod.
DATABASE_URL            -> Postgres/MySQL URL; SQLite is used when absent.
CORS_ALLOW_ALL_ORIGINS  -> Dev toggle to allow any origin (default True in dev).
CORS_ALLOWED_ORIGINS    -> Comma-separated list of exact origins (prod).
FRONTEND_URL            -> Where "/" and "/auth" send browsers.
PORTAL_JWT_SECRET       -> Signing key for session tokens (defaults to SECRET_KEY).
PORTAL_AUTO_REGISTER    -> When true (default) an unknown email at login creates
                           a USER account. Set false to make login fail closed.
PORTAL_LOGIN_URL        -> Where the admin gate sends unauthenticated visitors.
PORTAL_HOME_URL         -> Where the admin gate sends non-admin visitors.
PORTAL_GATED_PREFIXES   -> Comma-separated path prefixes that require ADMIN.

Why some ordering matters
===============================================================================
- We compute DEBUG first so SECRET_KEY can enforce “prod requires a key.”
- SECRET_KEY only falls back to a dev key when DEBUG=True, and the token
  signing key falls back to SECRET_KEY, so production never signs with a
  well-known key.
"""

from pathlib import Path
from datetime import timedelta
from urllib.parse import urlparse
import os
import sys

import dj_database_url


# ---------------------------
# Helpers for env parsing
# ---------------------------
def _get_bool(env_key: str, default: bool = False) -> bool:
    """Parse booleans from env like '1', 'true', 'yes'."""
    raw = os.environ.get(env_key, str(default))
    return str(raw).strip().lower() in {"1", "true", "yes", "on"}

def _get_list(env_key: str, default=None):
    """Parse comma-separated lists from env (e.g., 'a.com,b.com')."""
    if default is None:
        default = []
    raw = os.environ.get(env_key)
    if not raw:
        return default
    return [item.strip() for item in raw.split(",") if item.strip()]

def _origin_from(url: str) -> str:
    """Turn a full URL into an origin string (scheme://host[:port])."""
    p = urlparse(url or "")
    if not p.scheme or not p.hostname:
        return ""
    return f"{p.scheme}://{p.hostname}" + (f":{p.port}" if p.port else "")


BASE_DIR = Path(__file__).resolve().parent.parent

# Reads DJANGO_DEBUG from env. Defaults to True for dev.
DEBUG = _get_bool("DJANGO_DEBUG", True)

RUNNING_TESTS = "test" in sys.argv or "pytest" in sys.modules


# --- Frontend URL & CORS/CSRF (dev-friendly defaults) ---
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000/")

CORS_ALLOW_ALL_ORIGINS = _get_bool("CORS_ALLOW_ALL_ORIGINS", DEBUG)
CORS_ALLOW_CREDENTIALS = True  # the authToken cookie travels with FE requests

CORS_ALLOWED_ORIGINS = _get_list("CORS_ALLOWED_ORIGINS", [])
if not CORS_ALLOWED_ORIGINS and FRONTEND_URL:
    derived = _origin_from(FRONTEND_URL)
    if derived:
        CORS_ALLOWED_ORIGINS = [derived]

CSRF_TRUSTED_ORIGINS = _get_list("CSRF_TRUSTED_ORIGINS", [])
if not CSRF_TRUSTED_ORIGINS and FRONTEND_URL:
    derived = _origin_from(FRONTEND_URL)
    if derived:
        CSRF_TRUSTED_ORIGINS = [derived]

CORS_ALLOWED_ORIGIN_REGEXES = _get_list("CORS_ALLOWED_ORIGIN_REGEXES", [])

# Only the FE may frame us.
_allowed_ancestors = {"'self'"}
_frontend_origin = _origin_from(FRONTEND_URL) if FRONTEND_URL else ""
if _frontend_origin:
    _allowed_ancestors.add(_frontend_origin)
for o in CORS_ALLOWED_ORIGINS:
    if o:
        _allowed_ancestors.add(o)

# django-csp v4+ format:
CONTENT_SECURITY_POLICY = {
    "DIRECTIVES": {
        "frame-ancestors": sorted(_allowed_ancestors),
    }
}


# SECRET_KEY with safe production enforcement
#    - In dev (DEBUG=True): fallback to a dev key if none provided
#    - In prod (DEBUG=False): require DJANGO_SECRET_KEY
SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY") or (
    "django-insecure-deptboard-7w2!c$k8n0p#q4v@x9z1m3r5t7y" if DEBUG else None
)
if not SECRET_KEY:
    raise RuntimeError("DJANGO_SECRET_KEY must be set when DJANGO_DEBUG=False")


ALLOWED_HOSTS = _get_list("DJANGO_ALLOWED_HOSTS", [] if DEBUG else ["127.0.0.1"])


INSTALLED_APPS = [
    # Django core
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third-party
    'rest_framework',
    'corsheaders',
    'django_filters',                             # filtering backend for DRF
    'drf_yasg',                                   # Swagger/OpenAPI docs
    'csp',

    # Local apps
    'users',
    'posts',
]

AUTH_USER_MODEL = "users.Account"

SWAGGER_SETTINGS = {
    "USE_SESSION_AUTH": False,
    "SECURITY_DEFINITIONS": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Paste: Bearer <token>",
        }
    },
}

MIDDLEWARE = [
    # CORS should be as high as possible
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',

    'django.middleware.security.SecurityMiddleware',
    "csp.middleware.CSPMiddleware",
    'whitenoise.middleware.WhiteNoiseMiddleware',  # Serves static in prod
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'users.gateway.AdminGateMiddleware',           # ADMIN-only page prefixes
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "users.authentication.PortalTokenAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_FILTER_BACKENDS": (
        "django_filters.rest_framework.DjangoFilterBackend",
    ),
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
        "rest_framework.parsers.MultiPartParser",
    ],
    "EXCEPTION_HANDLER": "deptboard_backend.errors.api_exception_handler",
    "DEFAULT_THROTTLE_CLASSES": [ "rest_framework.throttling.AnonRateThrottle" ],
    "DEFAULT_THROTTLE_RATES": {"anon": os.environ.get("PORTAL_ANON_THROTTLE", "30/min")},
}

# Disable throttling when running tests
if RUNNING_TESTS:
    REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}


# --- Session tokens ----------------------------------------------------------
# Tokens are SimpleJWT access tokens with extra `email`/`role` claims; they are
# verified statelessly (no DB) by users.tokens.verify.
PORTAL_JWT_SECRET = os.environ.get("PORTAL_JWT_SECRET") or SECRET_KEY

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(days=7),
    "ALGORITHM": "HS256",
    "SIGNING_KEY": PORTAL_JWT_SECRET,
    "USER_ID_FIELD": "id",
    "USER_ID_CLAIM": "user_id",
    "TOKEN_TYPE_CLAIM": "token_type",
}

PORTAL_AUTH_COOKIE = "authToken"
PORTAL_AUTO_REGISTER = _get_bool("PORTAL_AUTO_REGISTER", True)
PORTAL_LOGIN_URL = os.environ.get("PORTAL_LOGIN_URL", "/auth")
PORTAL_HOME_URL = os.environ.get("PORTAL_HOME_URL", "/")
# Post creation page + post detail/edit pages.
PORTAL_ADMIN_GATED_PREFIXES = tuple(_get_list("PORTAL_GATED_PREFIXES", ["/create", "/post"]))


ROOT_URLCONF = 'deptboard_backend.urls'
WSGI_APPLICATION = 'deptboard_backend.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]


# --- Database (DATABASE_URL when set; SQLite otherwise) ---
DB_URL = os.environ.get("DATABASE_URL", "").strip()
IS_POSTGRES = DB_URL.startswith("postgres://") or DB_URL.startswith("postgresql://")

if DB_URL:
    DATABASES = {
        "default": dj_database_url.parse(
            DB_URL,
            conn_max_age=600,
            ssl_require=IS_POSTGRES,  # only apply SSL flag for Postgres URLs
        )
    }
else:
    # Default to SQLite for local dev/CI
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }


AUTHENTICATION_BACKENDS = [
    "django.contrib.auth.backends.ModelBackend",
]

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

if RUNNING_TESTS:
    # Hashing speed is irrelevant to what the tests check.
    PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "django.request": {  # 500s, 404s with exceptions
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": True,
        },
        "django": {
            "handlers": ["console"],
            "level": "INFO",
        },
        "deptboard_backend": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "users": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "posts": {"handlers": ["console"], "level": "INFO", "propagate": False},
    },
}
